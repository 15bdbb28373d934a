"""Collection names, roles and the fixed option lists used by forms."""


class Collections:
    USERS = 'Usuarios'
    COURSES = 'Cursos'
    MODULES = 'Modulos'
    CONTENTS = 'Content'
    ENROLLMENTS = 'Enrollments'
    COURSE_COMMENTS = 'CourseComments'
    VIDEOS = 'Videos'

    TRIAL_CLASSES = 'Prueba'
    INSTRUCTOR_CLASSES = 'InstructorClasePrueba'
    AGENDADOR_CLASSES = 'AgendadorClasePrueba'
    FORMACION_CLASSES = 'FORMACIONClasePrueba'
    INSTRUCTOR_SCHEDULE = 'HorarioInstructores'


SCHEDULE_DOC_ID = 'current'


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

ROLE_ADMIN = 'admin'
ROLE_DEVELOP = 'develop'
ROLE_INSTRUCTOR = 'instructor'
ROLE_FORMACION = 'formacion de grupo'
ROLE_AGENDADOR = 'agendador'
ROLE_BASE = 'base'
ROLE_CLIENTE = 'cliente'

ROLES = (
    ROLE_ADMIN, ROLE_DEVELOP, ROLE_INSTRUCTOR, ROLE_FORMACION,
    ROLE_AGENDADOR, ROLE_BASE, ROLE_CLIENTE,
)

ROLE_HIERARCHY = {
    ROLE_DEVELOP: 110,
    ROLE_ADMIN: 100,
    ROLE_INSTRUCTOR: 80,
    ROLE_FORMACION: 60,
    ROLE_AGENDADOR: 40,
    ROLE_BASE: 20,
    ROLE_CLIENTE: 10,
}

STAFF_ROLES = (ROLE_ADMIN, ROLE_DEVELOP)
MODERATOR_ROLES = (ROLE_ADMIN, ROLE_DEVELOP, ROLE_INSTRUCTOR)


def has_role_at_least(role, minimum):
    """True when ``role`` sits at or above ``minimum`` in the hierarchy."""
    return ROLE_HIERARCHY.get(role, 0) >= ROLE_HIERARCHY.get(minimum, 0)


# ---------------------------------------------------------------------------
# Weekly instructor schedule grid
# ---------------------------------------------------------------------------

DAYS = [
    ('monday', 'Lunes'),
    ('tuesday', 'Martes'),
    ('wednesday', 'Miércoles'),
    ('thursday', 'Jueves'),
    ('friday', 'Viernes'),
    ('saturday', 'Sábado'),
]

DAY_IDS = [day_id for day_id, _ in DAYS]

HOURS = [
    '8:00 AM', '9:00 AM', '10:00 AM', '11:00 AM', '12:00 PM', '1:00 PM',
    '2:00 PM', '3:00 PM', '4:00 PM', '5:00 PM',
    '6:00 PM', '7:00 PM', '8:00 PM', '9:00 PM',
]


# ---------------------------------------------------------------------------
# Form option lists
# ---------------------------------------------------------------------------

STATUS_VALS = [
    ('CERRO', 'CERRO'),
    ('NO CERRO', 'NO CERRO'),
    ('ESPERA', 'ESPERA'),
]

HORARIO_VALS = [
    ('8:00 AM', '8:00 am'),
    ('9:00 AM', '9:00 am'),
    ('10:00 AM', '10:00 am'),
    ('11:00 AM', '11:00 am'),
    ('12:00 PM', '12:00 pm'),
    ('13:00 PM', '1:00 pm'),
    ('14:00 PM', '2:00 pm'),
    ('15:00 PM', '3:00 pm'),
    ('16:00 PM', '4:00 pm'),
    ('17:00 PM', '5:00 pm'),
    ('18:00 PM', '6:00 pm'),
    ('19:00 PM', '7:00 pm'),
    ('20:00 PM', '8:00 pm'),
    ('21:00 PM', '9:00 pm'),
    ('PENDIENTE', 'Pendiente'),
]

DIA_VALS = [
    ('CURSO EN VIDEO', 'Curso en video'),
    ('L-V', 'Lunes a Viernes'),
    ('PENDIENTE', 'Pendiente'),
    ('SABADO', 'Sabado'),
    ('DOMINGO', 'Domingo'),
    ('INDIVIDUAL', 'Individual'),
]

NIVELES = [
    ('BASICO', 'Básico'),
    ('INTERMEDIO', 'Intermedio'),
    ('AVANZADO', 'Avanzado'),
    ('LENTO', 'Lento'),
]

SUB_NIVELES = [
    ('NO-BASICS', 'NO BASICS'),
    ('TRANSICIONES', 'Transiciones'),
]

COURSE_STATUS = [('Activo', 'Activo'), ('Inactivo', 'Inactivo')]
COURSE_TYPES = [('Online', 'Online'), ('Presencial', 'Presencial'), ('Híbrido', 'Híbrido')]
CONTENT_TYPES = [('video', 'Video'), ('document', 'Documento'), ('quiz', 'Quiz')]
COMMENT_TYPES = [('general', 'General'), ('opinion', 'Opinión'), ('video', 'Video')]

ENROLLMENT_STATUS_DEFAULT = 'En progreso'
TRIAL_PENDING_STATUS = 'ESPERA'
