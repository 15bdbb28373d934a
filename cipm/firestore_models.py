"""
Firestore document models using Python dataclasses.

Each model includes:
  - An `id` field for the Firestore document ID
  - A `to_dict()` instance method producing the stored document (the
    collections use camelCase keys)
  - A `from_dict(data, doc_id)` classmethod for deserialization
  - Sensible defaults for all fields

Datetime fields are kept as native datetime objects since Firestore
handles them natively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cipm.constants import (ROLE_CLIENTE, MODERATOR_ROLES, ROLE_ADMIN, ROLE_DEVELOP,
                            ROLE_INSTRUCTOR, ROLE_AGENDADOR, ROLE_FORMACION,
                            ENROLLMENT_STATUS_DEFAULT)


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _parse_datetime(value) -> Optional[datetime]:
    """Convert a value to datetime. Accepts datetime objects, ISO-format
    strings and `{"seconds": ...}` timestamp maps."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        value = value.replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return None
    if isinstance(value, dict) and isinstance(value.get("seconds"), (int, float)):
        return datetime.fromtimestamp(value["seconds"], tz=timezone.utc)
    return None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


# ===========================================================================
# 1. User  (Usuarios)
# ===========================================================================

@dataclass
class User:
    id: Optional[str] = None          # Firebase Auth UID
    name: str = ""
    email: str = ""
    role: str = ROLE_CLIENTE
    avatar: str = ""
    phone: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None

    # -- Role helpers --------------------------------------------------------

    def is_admin(self) -> bool:
        return self.role in (ROLE_ADMIN, ROLE_DEVELOP)

    def is_instructor(self) -> bool:
        return self.role == ROLE_INSTRUCTOR

    def is_agendador(self) -> bool:
        return self.role == ROLE_AGENDADOR

    def is_formacion(self) -> bool:
        return self.role == ROLE_FORMACION

    def can_moderate(self) -> bool:
        return self.role in MODERATOR_ROLES

    # -- Serialization -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "avatar": self.avatar or "",
            "createdAt": self.created_at or _now().isoformat(),
        }
        if self.phone:
            data["phone"] = self.phone
        if self.status:
            data["status"] = self.status
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> User:
        return cls(
            id=doc_id or data.get("id"),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", ROLE_CLIENTE),
            avatar=data.get("avatar") or "",
            phone=data.get("phone"),
            status=data.get("status"),
            created_at=data.get("createdAt"),
        )


# ===========================================================================
# 2. Course  (Cursos)
# ===========================================================================

@dataclass
class Course:
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    price: float = 0
    duration: str = ""
    status: str = "Activo"
    type: str = "Online"
    enrollments: int = 0
    rating: Optional[float] = None
    modules: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "duration": self.duration,
            "status": self.status,
            "type": self.type,
            "enrollments": self.enrollments,
            "rating": self.rating,
            "modules": list(self.modules),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Course:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            price=data.get("price") or 0,
            duration=data.get("duration", ""),
            status=data.get("status", "Activo"),
            type=data.get("type", "Online"),
            enrollments=data.get("enrollments") or 0,
            rating=data.get("rating"),
            modules=list(data.get("modules") or []),
        )


# ===========================================================================
# 3. Module  (Modulos)
# ===========================================================================

@dataclass
class Module:
    id: Optional[str] = None
    course_id: str = ""
    title: str = ""
    description: str = ""
    order: int = 1
    status: str = "Activo"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courseId": self.course_id,
            "title": self.title,
            "description": self.description,
            "order": self.order,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Module:
        return cls(
            id=doc_id,
            course_id=data.get("courseId", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            order=data.get("order") or 1,
            status=data.get("status", "Activo"),
        )


# ===========================================================================
# 4. Content  (Content)
# ===========================================================================

@dataclass
class Content:
    id: Optional[str] = None
    course_id: str = ""
    module_id: str = ""
    title: str = ""
    type: str = "video"
    url: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None
    questions: Optional[int] = None
    order: int = 0
    status: str = "Activo"
    storage_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "courseId": self.course_id,
            "moduleId": self.module_id,
            "title": self.title,
            "type": self.type,
            "order": self.order,
            "status": self.status,
        }
        # Only the fields relevant to the content type are stored
        for key, value in (("url", self.url), ("duration", self.duration),
                           ("description", self.description),
                           ("questions", self.questions),
                           ("storagePath", self.storage_path)):
            if value not in (None, ""):
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Content:
        return cls(
            id=doc_id,
            course_id=data.get("courseId", ""),
            module_id=data.get("moduleId", ""),
            title=data.get("title", ""),
            type=data.get("type", "video"),
            url=data.get("url"),
            duration=data.get("duration"),
            description=data.get("description"),
            questions=data.get("questions"),
            order=data.get("order") or 0,
            status=data.get("status", "Activo"),
            storage_path=data.get("storagePath"),
        )


# ===========================================================================
# 5. Enrollment  (Enrollments)
# ===========================================================================

@dataclass
class Enrollment:
    id: Optional[str] = None
    student_id: str = ""
    course_id: str = ""
    enrollment_date: str = ""
    status: str = ENROLLMENT_STATUS_DEFAULT
    progress: int = 0
    last_access: str = ""

    def to_dict(self) -> Dict[str, Any]:
        today = _now().strftime("%d/%m/%Y")
        return {
            "studentId": self.student_id,
            "courseId": self.course_id,
            "enrollmentDate": self.enrollment_date or today,
            "status": self.status,
            "progress": self.progress,
            "lastAccess": self.last_access or today,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Enrollment:
        return cls(
            id=doc_id,
            student_id=data.get("studentId", ""),
            course_id=data.get("courseId", ""),
            enrollment_date=data.get("enrollmentDate", ""),
            status=data.get("status", ENROLLMENT_STATUS_DEFAULT),
            progress=data.get("progress") or 0,
            last_access=data.get("lastAccess", ""),
        )


# ===========================================================================
# 6. CourseComment  (CourseComments)
# ===========================================================================

@dataclass
class CourseComment:
    id: Optional[str] = None
    course_id: str = ""
    user_id: str = ""
    user_name: str = ""
    user_role: str = ROLE_CLIENTE
    user_avatar: Optional[str] = None
    content: str = ""
    parent_id: Optional[str] = None
    comment_type: str = "general"
    content_id: Optional[str] = None
    content_title: Optional[str] = None
    likes: int = 0
    liked_by: List[str] = field(default_factory=list)
    is_pinned: bool = False
    is_moderated: bool = False
    is_edited: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    edited_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "courseId": self.course_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userRole": self.user_role or ROLE_CLIENTE,
            "content": self.content,
            "parentId": self.parent_id or None,
            "commentType": self.comment_type or "general",
            "contentId": self.content_id or None,
            "contentTitle": self.content_title or None,
            "likes": self.likes,
            "likedBy": list(self.liked_by),
            "isPinned": self.is_pinned,
            "isModerated": self.is_moderated,
            "isEdited": self.is_edited,
            "createdAt": self.created_at or _now(),
            "updatedAt": self.updated_at or _now(),
        }
        if self.user_avatar:
            data["userAvatar"] = self.user_avatar
        if self.edited_at:
            data["editedAt"] = self.edited_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> CourseComment:
        return cls(
            id=doc_id,
            course_id=data.get("courseId", ""),
            user_id=data.get("userId", ""),
            user_name=data.get("userName", ""),
            user_role=data.get("userRole", ROLE_CLIENTE),
            user_avatar=data.get("userAvatar"),
            content=data.get("content", ""),
            parent_id=data.get("parentId"),
            comment_type=data.get("commentType", "general"),
            content_id=data.get("contentId"),
            content_title=data.get("contentTitle"),
            likes=data.get("likes") or 0,
            liked_by=list(data.get("likedBy") or []),
            is_pinned=data.get("isPinned", False),
            is_moderated=data.get("isModerated", False),
            is_edited=data.get("isEdited", False),
            created_at=_parse_datetime(data.get("createdAt")),
            updated_at=_parse_datetime(data.get("updatedAt")),
            edited_at=_parse_datetime(data.get("editedAt")),
        )


# ===========================================================================
# 7. Trial classes
# ===========================================================================

@dataclass
class InstructorClass:
    """A trial class as the instructor sees it (InstructorClasePrueba)."""
    id: Optional[str] = None
    nombre_alumno: str = ""
    numero: str = ""
    dia: str = ""
    horario: str = ""
    observaciones: str = ""
    maestro: str = ""
    nivel: str = ""
    sub_nivel: str = ""
    ano_semana: str = ""
    fecha: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "nombreAlumno": self.nombre_alumno,
            "numero": self.numero,
            "dia": self.dia,
            "horario": self.horario,
            "observaciones": self.observaciones,
            "maestro": self.maestro,
            "anoSemana": self.ano_semana,
        }
        if self.nivel:
            data["nivel"] = self.nivel
        if self.sub_nivel:
            data["subNivel"] = self.sub_nivel
        if self.fecha:
            data["fecha"] = self.fecha
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> InstructorClass:
        return cls(
            id=doc_id or data.get("id"),
            nombre_alumno=data.get("nombreAlumno", ""),
            numero=data.get("numero", ""),
            dia=data.get("dia", ""),
            horario=data.get("horario", ""),
            observaciones=data.get("observaciones", ""),
            maestro=data.get("maestro", ""),
            nivel=data.get("nivel", ""),
            sub_nivel=data.get("subNivel", ""),
            ano_semana=data.get("anoSemana", ""),
            fecha=data.get("fecha"),
        )


@dataclass
class AgendadorClass:
    """A trial class booked by a scheduler (AgendadorClasePrueba)."""
    id: Optional[str] = None
    nombre_alumno: str = ""
    numero: str = ""
    dia_contacto: str = ""
    mes_contacto: str = ""
    quien_agendo: str = ""
    modalidad: str = ""
    horario_presencial: str = ""
    dia_clase_prueba: str = ""
    hora_clase_prueba: str = ""
    maestro: str = ""
    mayor_edad: str = ""
    nivel: str = ""
    ano_semana: str = ""
    observaciones: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nombreAlumno": self.nombre_alumno,
            "numero": self.numero,
            "diaContacto": self.dia_contacto,
            "mesContacto": self.mes_contacto,
            "quienAgendo": self.quien_agendo,
            "modalidad": self.modalidad,
            "horarioPresencial": self.horario_presencial,
            "diaClasePrueba": self.dia_clase_prueba,
            "horaClasePrueba": self.hora_clase_prueba,
            "maestro": self.maestro,
            "mayorEdad": self.mayor_edad,
            "nivel": self.nivel,
            "anoSemana": self.ano_semana,
            "observaciones": self.observaciones,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> AgendadorClass:
        return cls(
            id=doc_id or data.get("id"),
            nombre_alumno=data.get("nombreAlumno", ""),
            numero=data.get("numero", ""),
            dia_contacto=data.get("diaContacto", ""),
            mes_contacto=data.get("mesContacto", ""),
            quien_agendo=data.get("quienAgendo", ""),
            modalidad=data.get("modalidad", ""),
            horario_presencial=data.get("horarioPresencial", ""),
            dia_clase_prueba=data.get("diaClasePrueba", ""),
            hora_clase_prueba=data.get("horaClasePrueba", ""),
            maestro=data.get("maestro", ""),
            mayor_edad=data.get("mayorEdad", ""),
            nivel=data.get("nivel", ""),
            ano_semana=data.get("anoSemana", ""),
            observaciones=data.get("observaciones", ""),
        )

    def to_instructor_class(self) -> InstructorClass:
        """The instructor-side record created alongside every booking."""
        return InstructorClass(
            nombre_alumno=self.nombre_alumno,
            numero="",
            dia=self.dia_clase_prueba,
            horario=self.hora_clase_prueba,
            observaciones="",
            maestro=self.maestro,
            ano_semana=self.ano_semana,
        )


@dataclass
class FormacionRecord:
    """Group-formation outcome of a trial class (FORMACIONClasePrueba)."""
    id: Optional[str] = None
    status: str = ""
    week: str = ""
    nombre: str = ""
    telefono: str = ""
    modalidad: str = ""
    horario: str = ""
    observaciones: str = ""
    fecha: Optional[Any] = None
    maestro: str = ""
    nivel: str = ""
    tipo: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "week": self.week,
            "nombre": self.nombre,
            "telefono": self.telefono,
            "modalidad": self.modalidad,
            "horario": self.horario,
            "observaciones": self.observaciones,
            "fecha": self.fecha or _now(),
            "maestro": self.maestro,
            "nivel": self.nivel,
            "tipo": self.tipo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> FormacionRecord:
        return cls(
            id=doc_id or data.get("id"),
            status=_clean(data.get("status")),
            week=data.get("week", ""),
            nombre=data.get("nombre", ""),
            telefono=data.get("telefono", ""),
            modalidad=data.get("modalidad", ""),
            horario=data.get("horario", ""),
            observaciones=data.get("observaciones", ""),
            fecha=data.get("fecha"),
            maestro=data.get("maestro", ""),
            nivel=data.get("nivel", ""),
            tipo=data.get("tipo", ""),
        )


# ===========================================================================
# 8. Video  (Videos)
# ===========================================================================

def _split_tags(value) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    return [t.strip() for t in (value or []) if isinstance(t, str) and t.strip()]


@dataclass
class Video:
    """A standalone entry of the video library, outside any course."""
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    url: str = ""
    duration: str = ""
    thumbnail: str = ""
    tags: List[str] = field(default_factory=list)
    featured: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "duration": self.duration,
            "thumbnail": self.thumbnail,
            "tags": _split_tags(self.tags),
            "featured": bool(self.featured),
            "createdAt": self.created_at or _now(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Video:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            url=data.get("url", ""),
            duration=data.get("duration", ""),
            thumbnail=data.get("thumbnail", ""),
            tags=_split_tags(data.get("tags")),
            featured=data.get("featured", False),
            created_at=_parse_datetime(data.get("createdAt")),
        )
