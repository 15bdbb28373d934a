from flask_wtf import FlaskForm
from wtforms import BooleanField, FloatField, IntegerField, PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, EqualTo, Length, NumberRange, Optional, Regexp, URL

from cipm.constants import (
    COMMENT_TYPES, CONTENT_TYPES, COURSE_STATUS, COURSE_TYPES, DAYS, DIA_VALS, HORARIO_VALS,
    HOURS, NIVELES, ROLES, STATUS_VALS, SUB_NIVELES,
)

ROLE_CHOICES = [(r, r) for r in ROLES]


def _required(message):
    return DataRequired(message=message)


# -- Users and auth ---------------------------------------------------------

class LoginForm(FlaskForm):
    email = StringField('Correo', validators=[_required('El correo electrónico es requerido.'), Email(message='Debe ser un correo electrónico válido.')])
    password = PasswordField('Contraseña', validators=[_required('La contraseña es requerida.')])


class GoogleLoginForm(FlaskForm):
    idToken = StringField('Token', validators=[_required('El token de Google es requerido.')])


class UserForm(FlaskForm):
    name = StringField('Nombre', validators=[_required('El nombre es requerido.'), Length(min=3, message='El nombre debe tener al menos 3 caracteres.')])
    email = StringField('Correo', validators=[_required('El correo electrónico es requerido.'), Email(message='Debe ser un correo electrónico válido.')])
    password = PasswordField('Contraseña', validators=[_required('La contraseña es requerida.'), Length(min=6, message='La contraseña debe tener al menos 6 caracteres.')])
    role = SelectField('Rol', choices=ROLE_CHOICES, validators=[_required('El rol es requerido.')])
    avatar = StringField('Avatar', validators=[Optional()])


class RegistrationForm(FlaskForm):
    """Self sign-up; always creates a ``cliente``."""
    name = StringField('Nombre', validators=[_required('El nombre es requerido.'), Length(min=3, message='El nombre debe tener al menos 3 caracteres.')])
    email = StringField('Correo', validators=[_required('El correo electrónico es requerido.'), Email(message='Debe ser un correo electrónico válido.')])
    password = PasswordField('Contraseña', validators=[_required('La contraseña es requerida.'), Length(min=6, message='La contraseña debe tener al menos 6 caracteres.')])
    confirm_password = PasswordField('Confirmar contraseña', validators=[_required('Confirma la contraseña.'), EqualTo('password', message='Las contraseñas no coinciden.')])


class UserUpdateForm(FlaskForm):
    name = StringField('Nombre', validators=[_required('El nombre es requerido.'), Length(min=3, message='El nombre debe tener al menos 3 caracteres.')])
    email = StringField('Correo', validators=[_required('El correo electrónico es requerido.'), Email(message='Debe ser un correo electrónico válido.')])
    password = PasswordField('Contraseña', validators=[Optional(), Length(min=6, message='La contraseña debe tener al menos 6 caracteres.')])
    role = SelectField('Rol', choices=ROLE_CHOICES, validators=[_required('El rol es requerido.')])
    avatar = StringField('Avatar', validators=[Optional()])


class PasswordChangeForm(FlaskForm):
    current_password = PasswordField('Contraseña actual', validators=[_required('Ingresa tu contraseña actual.')])
    new_password = PasswordField('Nueva contraseña', validators=[_required('Ingresa la nueva contraseña.'), Length(min=6, message='La contraseña debe tener al menos 6 caracteres.')])
    confirm_password = PasswordField('Confirmar contraseña', validators=[_required('Confirma la nueva contraseña.'), EqualTo('new_password', message='Las contraseñas no coinciden.')])


# -- Courses ----------------------------------------------------------------

class CourseForm(FlaskForm):
    title = StringField('Título', validators=[_required('El título es requerido.'), Length(min=3, message='El título debe tener al menos 3 caracteres.')])
    description = TextAreaField('Descripción', validators=[_required('La descripción es requerida.'), Length(min=10, message='La descripción debe tener al menos 10 caracteres.')])
    price = FloatField('Precio', default=0, validators=[NumberRange(min=0, message='El precio no puede ser negativo.')])
    duration = StringField('Duración', validators=[_required('La duración es requerida.')])
    status = SelectField('Estado', choices=COURSE_STATUS, default='Activo')
    type = SelectField('Modalidad', choices=COURSE_TYPES, default='Online')


class ModuleForm(FlaskForm):
    courseId = StringField('Curso', validators=[_required('El curso es requerido.')])
    title = StringField('Título', validators=[_required('El título es requerido.'), Length(min=3, message='El título debe tener al menos 3 caracteres.')])
    description = TextAreaField('Descripción', validators=[_required('La descripción es requerida.'), Length(min=10, message='La descripción debe tener al menos 10 caracteres.')])
    order = IntegerField('Orden', default=1, validators=[NumberRange(min=1, message='El orden debe ser mayor o igual a 1.')])
    status = SelectField('Estado', choices=COURSE_STATUS, default='Activo')


class ContentForm(FlaskForm):
    moduleId = StringField('Módulo', validators=[_required('El módulo es requerido.')])
    courseId = StringField('Curso', validators=[Optional()])
    title = StringField('Título', validators=[_required('El título es requerido.'), Length(min=3, message='El título debe tener al menos 3 caracteres.')])
    type = SelectField('Tipo', choices=CONTENT_TYPES, validators=[_required('El tipo es requerido.')])
    url = StringField('URL', validators=[Optional(), URL(message='Debe ser una URL válida.')])
    duration = StringField('Duración', validators=[Optional()])
    description = TextAreaField('Descripción', validators=[Optional()])
    questions = IntegerField('Preguntas', validators=[Optional(), NumberRange(min=0)])
    order = IntegerField('Orden', default=0, validators=[Optional()])


class EnrollmentForm(FlaskForm):
    studentId = StringField('Estudiante', validators=[_required('El estudiante es requerido.')])
    courseId = StringField('Curso', validators=[_required('El curso es requerido.')])


class EnrollmentUpdateForm(FlaskForm):
    progress = IntegerField('Progreso', validators=[Optional(), NumberRange(min=0, max=100, message='El progreso debe estar entre 0 y 100.')])
    status = StringField('Estado', validators=[Optional()])
    lastAccess = StringField('Último acceso', validators=[Optional()])


# -- Comments ---------------------------------------------------------------

class CommentForm(FlaskForm):
    courseId = StringField('Curso', validators=[_required('Course ID is required')])
    content = TextAreaField('Comentario', validators=[_required('Comment content is required'), Length(max=2000)])
    parentId = StringField('Respuesta a', validators=[Optional()])
    commentType = SelectField('Tipo', choices=COMMENT_TYPES, default='general')
    contentId = StringField('Contenido', validators=[Optional()])
    contentTitle = StringField('Título del contenido', validators=[Optional()])


class CommentUpdateForm(FlaskForm):
    content = TextAreaField('Comentario', validators=[_required('Comment content is required'), Length(max=2000)])


class ToggleForm(FlaskForm):
    value = BooleanField('Valor')


# -- Trial classes ----------------------------------------------------------

class InstructorClassForm(FlaskForm):
    nombreAlumno = StringField('Alumno', validators=[_required('El nombre del alumno es requerido.')])
    numero = StringField('Teléfono', validators=[_required('El número de teléfono es requerido.')])
    dia = StringField('Día', validators=[_required('El día es requerido.')])
    horario = StringField('Horario', validators=[_required('El horario es requerido.')])
    observaciones = TextAreaField('Observaciones', validators=[Optional()])
    fecha = StringField('Fecha', validators=[Optional()])
    maestro = StringField('Maestro', validators=[_required('El nombre del maestro es requerido.')])
    nivel = SelectField('Nivel', choices=NIVELES, validators=[_required('El nivel es requerido.')])
    subNivel = SelectField('Subnivel', choices=[('', '')] + SUB_NIVELES, default='', validators=[Optional()])
    anoSemana = StringField('Año y semana', validators=[Optional()])


class AgendadorClassForm(FlaskForm):
    nombreAlumno = StringField('Alumno', validators=[_required('El nombre del alumno es obligatorio')])
    numero = StringField('Teléfono', validators=[Optional()])
    diaContacto = StringField('Día de contacto', validators=[_required('El día de contacto es obligatorio')])
    mesContacto = StringField('Mes de contacto', validators=[_required('El mes de contacto es obligatorio')])
    quienAgendo = StringField('Agendó', validators=[Optional()])
    modalidad = StringField('Modalidad', validators=[Optional()])
    horarioPresencial = StringField('Horario presencial', validators=[Optional()])
    anoSemana = StringField('Año y semana', validators=[_required('El año y la semana son obligatorios')])
    diaClasePrueba = StringField('Día de la clase', validators=[Optional()])
    horaClasePrueba = StringField('Hora de la clase', validators=[Optional()])
    maestro = StringField('Maestro', validators=[Optional()])
    mayorEdad = StringField('Mayor de edad', validators=[Optional()])
    nivel = StringField('Nivel', validators=[Optional()])
    observaciones = TextAreaField('Observaciones', validators=[Optional()])


class FormacionForm(FlaskForm):
    status = SelectField('Estado', choices=STATUS_VALS, validators=[_required('El estado es requerido.')])
    week = StringField('Semana', validators=[_required('La semana es requerida.')])
    nombre = StringField('Nombre', validators=[_required('El nombre es requerido.')])
    telefono = StringField('Teléfono', validators=[_required('El teléfono es requerido.')])
    modalidad = StringField('Modalidad', validators=[Optional()])
    horario = SelectField('Horario', choices=HORARIO_VALS, validators=[_required('El horario es requerido.')])
    observaciones = TextAreaField('Observaciones', validators=[Optional()])
    maestro = StringField('Maestro', validators=[_required('El maestro es requerido.')])
    nivel = SelectField('Nivel', choices=NIVELES, validators=[_required('El nivel es requerido.')])
    tipo = SelectField('Tipo', choices=DIA_VALS, validators=[_required('El tipo es requerido.')])


# -- Instructor schedule ----------------------------------------------------

class ScheduleSlotForm(FlaskForm):
    day = SelectField('Día', choices=DAYS, validators=[_required('El día es requerido.')])
    hour = SelectField('Hora', choices=[(h, h) for h in HOURS], validators=[_required('La hora es requerida.')])
    instructorId = StringField('Instructor', validators=[_required('El instructor es requerido.')])


# -- Video library ----------------------------------------------------------

DURATION_PATTERN = r'^(\d{1,2}:)?\d{1,2}:\d{2}$'


class VideoForm(FlaskForm):
    """Library video; ``tags`` is read from the raw body since it may be a list."""
    title = StringField('Título', validators=[_required('El título es requerido.')])
    description = TextAreaField('Descripción', validators=[_required('La descripción es requerida.')])
    url = StringField('URL', validators=[_required('La URL es requerida.'), URL(message='Debe ser una URL válida.')])
    duration = StringField('Duración', validators=[
        _required('La duración es requerida.'),
        Regexp(DURATION_PATTERN, message='La duración debe tener formato mm:ss o hh:mm:ss'),
    ])
    thumbnail = StringField('Miniatura', validators=[Optional(), URL(message='Debe ser una URL válida.')])
    featured = BooleanField('Destacado', default=False)
