"""Tests for the dashboard statistics reducers."""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from cipm.services import estadisticas


@pytest.mark.parametrize(
    'value, expected',
    [
        (date(2025, 1, 1), 1),
        (date(2025, 1, 4), 1),
        (date(2025, 1, 5), 2),
        (date(2025, 4, 10), 15),
        (date(2025, 12, 31), 1),
        (datetime(2023, 1, 1, 12, tzinfo=timezone.utc), 1),
    ],
)
def test_week_number_uses_sunday_weeks(value, expected):
    assert estadisticas.week_number(value) == expected


def test_ano_semana_prefixes_two_digit_year():
    assert estadisticas.ano_semana(datetime(2025, 4, 10, tzinfo=timezone.utc)) == '2515'
    assert estadisticas.ano_semana(datetime(2025, 12, 31, tzinfo=timezone.utc)) == '251'
    assert estadisticas.ano_semana(datetime(2009, 3, 2, tzinfo=timezone.utc)) == '0910'


def test_convertir_fecha_variants():
    moment = datetime(2025, 4, 10, 8, 30, tzinfo=timezone.utc)

    assert estadisticas.convertir_fecha(moment) is moment
    assert estadisticas.convertir_fecha({'seconds': 0}) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert isinstance(estadisticas.convertir_fecha('no es fecha'), datetime)


def test_day_name_es():
    assert estadisticas.day_name_es(datetime(2025, 4, 10)) == 'jueves'
    assert estadisticas.day_name_es(datetime(2025, 4, 13)) == 'domingo'


def test_generar_estadisticas_counts_and_resolves_names():
    agendados = [
        {'anoSemana': '2515', 'horario': '6:00 PM', 'modalidad': 'Online', 'mayorEdad': 'Sí',
         'nivel': 'BASICO', 'dia': 'lunes', 'maestro': 'u1', 'quienAgendo': 'a1'},
        {'anoSemana': '2515', 'horaClasePrueba': '7:00 PM', 'modalidad': ' Online ', 'nivel': 'BASICO',
         'diaContacto': 'martes', 'maestro': 'ghost', 'quienAgendo': 'a1'},
        {'anoSemana': '2516', 'horario': '6:00 PM', 'nivel': '  ', 'maestro': 'u1'},
    ]

    stats = estadisticas.generar_estadisticas(agendados, {'u1': 'Ana', 'a1': 'María'})

    assert stats['porSemana'] == [{'week': '2515', 'total': 2}, {'week': '2516', 'total': 1}]
    assert stats['porHorario'] == [{'horario': '6:00 PM', 'total': 2}, {'horario': '7:00 PM', 'total': 1}]
    assert stats['porTipo'] == [{'tipo': 'Online', 'total': 2}]
    assert stats['porEdad'] == [{'tipo': 'Sí', 'total': 1}]
    assert stats['porNivel'] == [{'nivel': 'BASICO', 'total': 2}]
    assert stats['porDia'] == [{'dia': 'lunes', 'total': 1}, {'dia': 'martes', 'total': 1}]
    assert stats['porMaestro'] == [{'maestro': 'Ana', 'total': 2}]
    assert stats['porQuienAgendo'] == [{'nombre': 'María', 'total': 2}]


def test_generar_estadisticas_empty():
    stats = estadisticas.generar_estadisticas([], {})

    assert all(series == [] for series in stats.values())


def test_generar_estadisticas_cierres_falls_back_to_raw_instructor_id():
    registros = [
        {'status': 'CERRO', 'week': '2515', 'maestro': 'u1', 'modalidad': 'Online', 'tipo': 'L-V'},
        {'status': 'ESPERA', 'week': '2515', 'maestro': 'zz', 'horario': '18:00 PM', 'nivel': 'BASICO'},
    ]

    stats = estadisticas.generar_estadisticas_cierres(registros, {'u1': 'Ana'})

    assert stats['porStatus'] == [{'status': 'CERRO', 'total': 1}, {'status': 'ESPERA', 'total': 1}]
    assert stats['porSemana'] == [{'week': '2515', 'total': 2}]
    assert stats['porMaestro'] == [{'maestro': 'Ana', 'total': 1}, {'maestro': 'zz', 'total': 1}]
    assert stats['porModalidad'] == [{'modalidad': 'Online', 'total': 1}]
    assert stats['porTipo'] == [{'tipo': 'L-V', 'total': 1}]


def test_agrupar_coincidencias_keeps_current_week_only():
    today = datetime(2025, 4, 10, tzinfo=timezone.utc)
    estudiantes = [
        {'id': '1', 'week': '2515', 'maestro': 'Ana', 'horario': '18:00 PM',
         'fecha': datetime(2025, 4, 7, tzinfo=timezone.utc)},
        {'id': '2', 'week': '2515', 'maestro': 'Ana', 'horario': '18:00 PM', 'fecha': {'seconds': 1744416000}},
        {'id': '3', 'week': '2515', 'horario': ''},
        {'id': '4', 'week': '2514', 'maestro': 'Ana', 'horario': '18:00 PM'},
    ]

    grupos = estadisticas.agrupar_coincidencias(estudiantes, today=today)

    assert [(g['maestro'], g['horario']) for g in grupos] == [
        ('Ana', '18:00 PM'),
        (estadisticas.SIN_MAESTRO, estadisticas.SIN_HORARIO),
    ]
    assert [e['id'] for e in grupos[0]['estudiantes']] == ['1', '2']
    assert grupos[0]['estudiantes'][0]['dayName'] == 'lunes'
    assert grupos[0]['estudiantes'][1]['dayName'] == 'sábado'
    assert grupos[0]['week'] == '2515'


def test_pendientes_filters_waiting_records():
    registros = [{'id': '1', 'status': 'ESPERA'}, {'id': '2', 'status': 'CERRO'}]

    assert estadisticas.pendientes(registros) == [{'id': '1', 'status': 'ESPERA'}]


def test_most_common_prefers_later_entry_on_ties():
    series = [{'horario': '6:00 PM', 'total': 2}, {'horario': '7:00 PM', 'total': 2}, {'horario': '8:00 PM', 'total': 1}]

    assert estadisticas.most_common(series, 'horario') == '7:00 PM'
    assert estadisticas.most_common([], 'horario') == ''


@pytest.mark.parametrize(
    'duration, minutes',
    [('1:30:30', 90.5), ('2:30', 2.5), ('45', 0), ('abc', 0), (None, 0), ('', 0)],
)
def test_duration_to_minutes(duration, minutes):
    assert estadisticas.duration_to_minutes(duration) == minutes


COURSES = [
    {'id': 'c1', 'title': 'Inglés', 'rating': 4, 'status': 'Activo'},
    {'id': 'c2', 'title': 'Francés', 'rating': 4.5, 'status': 'Inactivo'},
    {'id': 'c3', 'title': 'Alemán'},
]
MODULES = [
    {'id': 'm1', 'courseId': 'c1', 'title': 'Saludos'},
    {'id': 'm2', 'courseId': 'c2', 'title': 'Bonjour'},
]
CONTENTS = [
    {'moduleId': 'm1', 'type': 'video', 'title': 'Intro', 'duration': '10:00'},
    {'moduleId': 'm1', 'type': 'document', 'title': 'Vocabulario'},
    {'moduleId': 'm2', 'type': 'video', 'title': 'Clase 1', 'duration': '1:00:00'},
]


def test_resumen_cursos():
    enrollments = [{'courseId': 'c2'}, {'courseId': 'c2'}, {'courseId': 'c1'}]

    resumen = estadisticas.resumen_cursos(COURSES, MODULES, enrollments, CONTENTS)

    assert resumen['totalCursos'] == 3
    assert resumen['cursosActivos'] == 1
    assert resumen['promedioRating'] == 4.25
    assert resumen['totalInscripciones'] == 3
    assert resumen['cursoMasPopular'] == {'title': 'Francés', 'inscripciones': 2}
    assert resumen['cursoConMasContenido'] == {'title': 'Inglés', 'totalContenido': 2}


def test_resumen_cursos_without_data():
    resumen = estadisticas.resumen_cursos([], [], [], [])

    assert resumen['promedioRating'] == 0.0
    assert resumen['cursoMasPopular']['title'] == 'N/A'


def test_resumen_estudiantes():
    now = datetime(2025, 4, 10, tzinfo=timezone.utc)
    students = [
        {'id': 's1', 'name': 'Luis', 'role': 'cliente', 'createdAt': '2025-04-01T00:00:00+00:00'},
        {'id': 's2', 'name': 'Eva', 'role': 'cliente', 'createdAt': '2024-01-01T00:00:00'},
        {'id': 'i1', 'name': 'Ana', 'role': 'instructor', 'createdAt': '2025-04-05T00:00:00+00:00'},
    ]
    enrollments = [
        {'studentId': 's1', 'courseId': 'c1', 'progress': 50},
        {'studentId': 's1', 'courseId': 'c2', 'progress': 10},
    ]

    resumen = estadisticas.resumen_estudiantes(students, enrollments, COURSES, now=now)

    assert resumen['totalEstudiantes'] == 2
    assert resumen['estudiantesActivos'] == 1
    assert resumen['estudiantesNuevos'] == 2
    assert resumen['cursosPorEstudiante'] == 1.0
    assert resumen['estudianteMasInscrito'] == {'name': 'Luis', 'inscripciones': 2}
    assert resumen['cursoMasPopular'] == {'title': 'Inglés', 'inscripciones': 1}
    assert resumen['promedioProgreso'] == 30.0


def test_resumen_videos():
    resumen = estadisticas.resumen_videos(COURSES, MODULES, CONTENTS)

    assert resumen['totalVideos'] == 2
    assert resumen['totalHoras'] == 1.17
    assert resumen['promedioDuracion'] == 35.0
    assert resumen['videoMasLargo'] == {'title': 'Clase 1', 'duration': '1:00:00'}
    assert resumen['cursoConMasVideos'] == {'title': 'Inglés', 'videosCurso': 1}
    assert resumen['moduloConMasVideos'] == {'title': 'Saludos', 'videos': 1}
