from firebase_admin import auth as fb_auth

from cipm import create_app
from cipm import firestore_dao as dao
from cipm.constants import (
    ROLE_ADMIN, ROLE_AGENDADOR, ROLE_CLIENTE, ROLE_FORMACION, ROLE_INSTRUCTOR,
)
from cipm.firebase_init import get_auth
from cipm.firestore_models import (
    AgendadorClass, Content, Course, Enrollment, FormacionRecord, Module, User,
)
from cipm.services import estadisticas, schedule as grid


def seed_database():
    app = create_app()
    with app.app_context():
        auth = get_auth()
        password = 'password123'

        print("Creating users...")

        def create_firebase_user(email, name, role):
            try:
                fb_user = auth.create_user(email=email, password=password, display_name=name)
            except fb_auth.EmailAlreadyExistsError:
                fb_user = auth.get_user_by_email(email)
            uid = fb_user.uid
            dao.create_user(uid, User(id=uid, name=name, email=email, role=role).to_dict())
            return uid

        admin_uid = create_firebase_user('admin@cipm.edu', 'Administración CIPM', ROLE_ADMIN)
        instructor1_uid = create_firebase_user('ana.lopez@cipm.edu', 'Ana López', ROLE_INSTRUCTOR)
        instructor2_uid = create_firebase_user('carlos.ruiz@cipm.edu', 'Carlos Ruiz', ROLE_INSTRUCTOR)
        agendador_uid = create_firebase_user('agenda@cipm.edu', 'María Agenda', ROLE_AGENDADOR)
        create_firebase_user('formacion@cipm.edu', 'Equipo Formación', ROLE_FORMACION)

        student_uids = [
            create_firebase_user(f'alumno{i}@example.com', f'Alumno {i}', ROLE_CLIENTE)
            for i in range(1, 6)
        ]

        print("Creating courses...")
        course_id = dao.create_course(Course(
            title='Inglés Básico',
            description='Curso introductorio de inglés conversacional.',
            price=1200,
            duration='12 semanas',
            type='Híbrido',
        ).to_dict())

        module_ids = []
        for order, title in enumerate(['Saludos y presentaciones', 'Rutinas diarias'], start=1):
            module_ids.append(dao.create_module(Module(
                course_id=course_id,
                title=title,
                description=f'Módulo {order} del curso de inglés básico.',
                order=order,
            ).to_dict()))

        dao.create_content(Content(
            course_id=course_id, module_id=module_ids[0], title='Bienvenida',
            type='video', url='https://example.com/videos/bienvenida.mp4', duration='5:30',
        ).to_dict())
        dao.create_content(Content(
            course_id=course_id, module_id=module_ids[0], title='Vocabulario',
            type='document', url='https://example.com/docs/vocabulario.pdf',
        ).to_dict())
        dao.create_content(Content(
            course_id=course_id, module_id=module_ids[1], title='Mi día',
            type='video', url='https://example.com/videos/mi-dia.mp4', duration='1:02:15',
        ).to_dict())

        print("Creating enrollments...")
        for uid in student_uids[:3]:
            dao.create_enrollment(Enrollment(student_id=uid, course_id=course_id).to_dict())

        print("Creating trial classes...")
        semana = estadisticas.ano_semana()
        booking = AgendadorClass(
            nombre_alumno='Laura Pérez', numero='5512345678', dia_contacto='lunes',
            mes_contacto='octubre', quien_agendo=agendador_uid, modalidad='Online',
            dia_clase_prueba='miércoles', hora_clase_prueba='6:00 PM',
            maestro=instructor1_uid, nivel='BASICO', ano_semana=semana,
        )
        dao.create_trial_class('agendador', booking.to_dict())
        dao.create_trial_class('instructor', booking.to_instructor_class().to_dict())
        dao.create_trial_class('formacion', FormacionRecord(
            status='ESPERA', week=semana, nombre='Laura Pérez', telefono='5512345678',
            modalidad='Online', horario='18:00 PM', maestro=instructor1_uid,
            nivel='BASICO', tipo='L-V',
        ).to_dict())

        print("Creating instructor schedule...")
        valid_ids = {instructor1_uid, instructor2_uid}
        schedule = grid.empty_schedule()
        schedule = grid.add_instructor(schedule, 'monday', '6:00 PM', instructor1_uid, valid_ids)
        schedule = grid.add_instructor(schedule, 'monday', '6:00 PM', instructor2_uid, valid_ids)
        schedule = grid.add_instructor(schedule, 'saturday', '10:00 AM', instructor2_uid, valid_ids)
        dao.update_schedule(schedule)

        print("\n" + "=" * 60)
        print("Cuentas de prueba (contraseña: password123)")
        print("=" * 60)
        print(f"  admin:      admin@cipm.edu ({admin_uid})")
        print("  instructor: ana.lopez@cipm.edu, carlos.ruiz@cipm.edu")
        print("  agendador:  agenda@cipm.edu")
        print("  formación:  formacion@cipm.edu")
        print("  clientes:   alumno1~5@example.com")
        print("\n" + "=" * 60)
        print("Base de datos inicializada.")


if __name__ == '__main__':
    seed_database()
