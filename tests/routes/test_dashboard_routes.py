"""Tests for the per-role dashboards."""
from __future__ import annotations

from cipm.services import estadisticas


def test_admin_dashboard_sections(client, login_as, fake_db):
    fake_db.seed('Cursos', 'c1', {'title': 'Inglés', 'status': 'Activo', 'rating': 4})
    fake_db.seed('Enrollments', 'e1', {'studentId': 'luis', 'courseId': 'c1', 'progress': 40})
    login_as('admin', 'admin')

    body = client.get('/dashboard/admin').get_json()

    assert set(body) == {'cursos', 'estudiantes', 'videos'}
    assert body['cursos']['totalCursos'] == 1
    assert body['cursos']['cursoMasPopular'] == {'title': 'Inglés', 'inscripciones': 1}
    assert body['videos']['totalVideos'] == 0


def test_admin_dashboard_is_restricted(client, login_as):
    login_as('ana', 'instructor')

    assert client.get('/dashboard/admin').status_code == 403


def test_agendador_dashboard_counts_own_bookings(client, login_as, fake_db):
    week = estadisticas.ano_semana()
    fake_db.seed('AgendadorClasePrueba', 'b1', {'id': 'b1', 'quienAgendo': 'maria', 'anoSemana': week,
                                                'horaClasePrueba': '6:00 PM'})
    fake_db.seed('AgendadorClasePrueba', 'b2', {'id': 'b2', 'quienAgendo': 'maria', 'anoSemana': '0101'})
    fake_db.seed('AgendadorClasePrueba', 'b3', {'id': 'b3', 'quienAgendo': 'otra', 'anoSemana': week})
    login_as('maria', 'agendador', name='María')

    body = client.get('/dashboard/agendador').get_json()

    assert body['anoSemana'] == week
    assert body['total'] == 2
    assert body['semanaActual'] == 1
    assert body['estadisticas']['porQuienAgendo'] == [{'nombre': 'María', 'total': 2}]


def test_instructor_dashboard(client, login_as, fake_db):
    fake_db.seed('InstructorClasePrueba', 'r1', {'id': 'r1', 'maestro': 'ana', 'horario': '6:00 PM', 'nivel': 'BASICO'})
    fake_db.seed('InstructorClasePrueba', 'r2', {'id': 'r2', 'maestro': 'ana', 'horario': '6:00 PM', 'nivel': 'LENTO'})
    fake_db.seed('InstructorClasePrueba', 'r3', {'id': 'r3', 'maestro': 'carlos', 'horario': '8:00 AM'})
    login_as('ana', 'instructor', name='Ana')

    body = client.get('/dashboard/instructor').get_json()

    assert body['totalStudents'] == 2
    assert body['mostUsedHour'] == '6:00 PM'
    assert body['mostCommonLevel'] == 'LENTO'
    assert body['estadisticas']['porMaestro'] == [{'maestro': 'Ana', 'total': 2}]
    assert body['calendario'] == []


def test_formacion_dashboard(client, login_as, fake_db):
    fake_db.seed('FORMACIONClasePrueba', 'f1', {'id': 'f1', 'status': 'ESPERA', 'week': '2515', 'maestro': 'Ana'})
    login_as('fer', 'formacion de grupo')

    body = client.get('/dashboard/formacion').get_json()

    assert body['estadisticas']['porStatus'] == [{'status': 'ESPERA', 'total': 1}]
    assert [r['id'] for r in body['pendientes']] == ['f1']
    assert 'coincidencias' in body
