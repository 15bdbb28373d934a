"""Aggregations behind the dashboards.

Every reducer is a single pass over plain document dicts. Series are
returned as lists of ``{label_key: value, 'total': n}`` in first-seen order,
which is the shape the dashboard charts consume.
"""
from collections import Counter
from datetime import date, datetime, timedelta, timezone

from cipm.constants import ROLE_CLIENTE, TRIAL_PENDING_STATUS

DIAS_SEMANA = ['lunes', 'martes', 'miércoles', 'jueves', 'viernes', 'sábado', 'domingo']

SIN_MAESTRO = 'Sin maestro'
SIN_HORARIO = 'Sin horario'


# ---------------------------------------------------------------------------
# Dates and weeks
# ---------------------------------------------------------------------------

def convertir_fecha(fecha):
    """Firestore timestamp, ``{'seconds': n}`` map or datetime -> datetime.

    Anything unparseable falls back to the current time.
    """
    if isinstance(fecha, datetime):
        return fecha
    if isinstance(fecha, date):
        return datetime(fecha.year, fecha.month, fecha.day, tzinfo=timezone.utc)
    if isinstance(fecha, dict) and isinstance(fecha.get('seconds'), (int, float)):
        return datetime.fromtimestamp(fecha['seconds'], tz=timezone.utc)
    return datetime.now(timezone.utc)


def day_name_es(value):
    return DIAS_SEMANA[value.weekday()]


def _start_of_week(d):
    # Weeks start on Sunday
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_number(value):
    """Week of the year; week 1 is the Sunday-based week holding January 1st."""
    d = value.date() if isinstance(value, datetime) else value
    start = _start_of_week(d)
    if start >= _start_of_week(date(d.year + 1, 1, 1)):
        return 1
    return (start - _start_of_week(date(d.year, 1, 1))).days // 7 + 1


def ano_semana(value=None):
    """Two-digit year followed by the week number, e.g. ``'2515'``."""
    value = value or datetime.now(timezone.utc)
    return f'{value.year % 100:02d}{week_number(value)}'


# ---------------------------------------------------------------------------
# Series helpers
# ---------------------------------------------------------------------------

def _clean(value):
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _to_series(counter, key):
    return [{key: label, 'total': total} for label, total in counter.items()]


def most_common(series, key):
    """Label with the highest total; on ties the later entry wins."""
    best = {key: '', 'total': 0}
    for item in series:
        if item['total'] >= best['total']:
            best = item
    return best[key]


def _top(items, count_key):
    """Item with the strictly highest positive ``count_key``, else None."""
    best = None
    for item in items:
        if item[count_key] > (best[count_key] if best else 0):
            best = item
    return best


# ---------------------------------------------------------------------------
# Trial-class statistics
# ---------------------------------------------------------------------------

def generar_estadisticas(agendados, usuarios_map):
    """Counts for scheduler / instructor trial-class records.

    Teachers and schedulers are counted by display name; ids missing from
    ``usuarios_map`` are not counted.
    """
    por_semana, por_horario, por_tipo, por_edad = Counter(), Counter(), Counter(), Counter()
    por_nivel, por_dia, por_maestro, por_quien = Counter(), Counter(), Counter(), Counter()

    for item in agendados:
        semana = _clean(item.get('anoSemana'))
        horario = _clean(item.get('horario') or item.get('horaClasePrueba'))
        tipo = _clean(item.get('modalidad'))
        edad = _clean(item.get('mayorEdad'))
        nivel = _clean(item.get('nivel'))
        dia = _clean(item.get('dia') or item.get('diaContacto'))
        maestro = _clean(usuarios_map.get(item.get('maestro')))
        quien = _clean(usuarios_map.get(item.get('quienAgendo')))

        if semana:
            por_semana[semana] += 1
        if horario:
            por_horario[horario] += 1
        if tipo:
            por_tipo[tipo] += 1
        if edad:
            por_edad[edad] += 1
        if nivel:
            por_nivel[nivel] += 1
        if dia:
            por_dia[dia] += 1
        if maestro:
            por_maestro[maestro] += 1
        if quien:
            por_quien[quien] += 1

    return {
        'porSemana': _to_series(por_semana, 'week'),
        'porHorario': _to_series(por_horario, 'horario'),
        'porTipo': _to_series(por_tipo, 'tipo'),
        'porEdad': _to_series(por_edad, 'tipo'),
        'porNivel': _to_series(por_nivel, 'nivel'),
        'porDia': _to_series(por_dia, 'dia'),
        'porMaestro': _to_series(por_maestro, 'maestro'),
        'porQuienAgendo': _to_series(por_quien, 'nombre'),
    }


def generar_estadisticas_cierres(registros, usuarios_map=None):
    """Counts for group-formation records (the "cierres").

    Unlike :func:`generar_estadisticas`, an unknown instructor id is counted
    under the raw id.
    """
    usuarios_map = usuarios_map or {}
    fields = ('status', 'week', 'horario', 'nivel', 'tipo', 'modalidad')
    counters = {f: Counter() for f in fields}
    por_maestro = Counter()

    for item in registros:
        for f in fields:
            value = _clean(item.get(f))
            if value:
                counters[f][value] += 1
        maestro_id = _clean(item.get('maestro'))
        if maestro_id:
            por_maestro[usuarios_map.get(maestro_id) or maestro_id] += 1

    return {
        'porStatus': _to_series(counters['status'], 'status'),
        'porSemana': _to_series(counters['week'], 'week'),
        'porHorario': _to_series(counters['horario'], 'horario'),
        'porNivel': _to_series(counters['nivel'], 'nivel'),
        'porTipo': _to_series(counters['tipo'], 'tipo'),
        'porModalidad': _to_series(counters['modalidad'], 'modalidad'),
        'porMaestro': _to_series(por_maestro, 'maestro'),
    }


def agrupar_coincidencias(estudiantes, today=None):
    """Group this week's formation records by instructor and time slot.

    Only records whose ``week`` equals the current :func:`ano_semana` are
    kept. Each grouped record is a copy with ``fecha`` parsed and a Spanish
    ``dayName`` added.
    """
    semana = ano_semana(today)
    grupos = {}
    for est in estudiantes:
        if est.get('week') != semana:
            continue
        maestro = est.get('maestro') or SIN_MAESTRO
        horario = est.get('horario') or SIN_HORARIO
        fecha = convertir_fecha(est.get('fecha'))
        record = dict(est, fecha=fecha, dayName=day_name_es(fecha))
        grupos.setdefault((maestro, horario), []).append(record)

    return [
        {'maestro': maestro, 'horario': horario, 'week': semana, 'estudiantes': records}
        for (maestro, horario), records in grupos.items()
    ]


def pendientes(registros, status=TRIAL_PENDING_STATUS):
    return [r for r in registros if r.get('status') == status]


# ---------------------------------------------------------------------------
# Admin dashboards
# ---------------------------------------------------------------------------

def duration_to_minutes(duration):
    """``'h:mm:ss'`` or ``'mm:ss'`` -> minutes; anything else is 0."""
    try:
        parts = [float(p) for p in (duration or '').split(':')]
    except ValueError:
        return 0
    if len(parts) == 3:
        return parts[0] * 60 + parts[1] + parts[2] / 60
    if len(parts) == 2:
        return parts[0] + parts[1] / 60
    return 0


def _content_by_course(courses, modules, contents, content_type=None):
    """{course_id: number of contents in the course's modules}."""
    per_module = Counter(
        c.get('moduleId') for c in contents
        if content_type is None or c.get('type') == content_type
    )
    totals = {}
    for course in courses:
        totals[course['id']] = sum(
            per_module.get(m['id'], 0) for m in modules if m.get('courseId') == course['id']
        )
    return totals


def resumen_cursos(courses, modules, enrollments, contents):
    rated = [
        c['rating'] for c in courses
        if isinstance(c.get('rating'), (int, float)) and not isinstance(c.get('rating'), bool)
    ]
    por_curso = Counter(e.get('courseId') for e in enrollments)
    contenido = _content_by_course(courses, modules, contents)

    popular = _top(
        [{'title': c.get('title', ''), 'inscripciones': por_curso.get(c['id'], 0)} for c in courses],
        'inscripciones',
    )
    mas_contenido = _top(
        [{'title': c.get('title', ''), 'totalContenido': contenido[c['id']]} for c in courses],
        'totalContenido',
    )
    return {
        'totalCursos': len(courses),
        'cursosActivos': len([c for c in courses if c.get('status') == 'Activo']),
        'promedioRating': round(sum(rated) / len(rated), 2) if rated else 0.0,
        'totalInscripciones': len(enrollments),
        'cursoMasPopular': popular or {'title': 'N/A', 'inscripciones': 0},
        'cursoConMasContenido': mas_contenido or {'title': 'N/A', 'totalContenido': 0},
    }


def resumen_estudiantes(students, enrollments, courses, now=None):
    now = now or datetime.now(timezone.utc)
    clientes = [s for s in students if s.get('role') == ROLE_CLIENTE]
    inscritos = {e.get('studentId') for e in enrollments}

    # Any account created in the last 30 days counts, whatever its role
    nuevos = 0
    for s in students:
        created = s.get('createdAt')
        if isinstance(created, str):
            try:
                created = datetime.fromisoformat(created.replace('Z', '+00:00'))
            except ValueError:
                continue
        if not isinstance(created, datetime):
            continue
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        if (now - created).total_seconds() / 86400 <= 30:
            nuevos += 1

    por_estudiante = Counter(e.get('studentId') for e in enrollments)
    por_curso = Counter(e.get('courseId') for e in enrollments)
    mas_inscrito = _top(
        [{'name': s.get('name', ''), 'inscripciones': por_estudiante.get(s['id'], 0)} for s in students],
        'inscripciones',
    )
    popular = _top(
        [{'title': c.get('title', ''), 'inscripciones': por_curso.get(c['id'], 0)} for c in courses],
        'inscripciones',
    )
    progress = [e.get('progress') or 0 for e in enrollments]

    return {
        'totalEstudiantes': len(clientes),
        'estudiantesActivos': len([s for s in clientes if s['id'] in inscritos]),
        'estudiantesNuevos': nuevos,
        'cursosPorEstudiante': round(len(enrollments) / len(clientes), 2) if clientes else 0,
        'estudianteMasInscrito': mas_inscrito or {'name': 'N/A', 'inscripciones': 0},
        'cursoMasPopular': popular or {'title': 'N/A', 'inscripciones': 0},
        'promedioProgreso': round(sum(progress) / len(progress), 2) if progress else 0,
    }


def resumen_videos(courses, modules, contents):
    videos = [c for c in contents if c.get('type') == 'video']
    minutes = [duration_to_minutes(v.get('duration') or '0:00') for v in videos]
    total_minutes = sum(minutes)

    mas_largo = None
    for video, length in zip(videos, minutes):
        if mas_largo is None or length > mas_largo[1]:
            mas_largo = (video, length)

    por_curso = _content_by_course(courses, modules, contents, content_type='video')
    curso_top = _top(
        [{'title': c.get('title', ''), 'videosCurso': por_curso[c['id']]} for c in courses],
        'videosCurso',
    )
    por_modulo = Counter(v.get('moduleId') for v in videos)
    modulo_top = _top(
        [{'title': m.get('title', ''), 'videos': por_modulo.get(m['id'], 0)} for m in modules],
        'videos',
    )

    return {
        'totalVideos': len(videos),
        'totalHoras': round(total_minutes / 60, 2),
        'promedioDuracion': round(total_minutes / len(videos), 2) if videos else 0,
        'videoMasLargo': (
            {'title': mas_largo[0].get('title', ''), 'duration': mas_largo[0].get('duration') or '0:00'}
            if mas_largo else {'title': 'N/A', 'duration': '0:00'}
        ),
        'cursoConMasVideos': curso_top or {'title': 'N/A', 'videosCurso': 0},
        'moduloConMasVideos': modulo_top or {'title': 'N/A', 'videos': 0},
    }
