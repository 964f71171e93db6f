from enum import Enum


DEFAULT_CHAPTER_LABEL = "Général"

class PlacementKindEnum(str, Enum):
    GRADE = "grade"
    CURRICULUM = "curriculum"

class LessonOrderingEnum(str, Enum):
    CREATED = "created"
    CURRICULUM = "curriculum"

class LessonTypeEnum(str, Enum):
    COURS = "Cours"
    EXERCICE = "Exercice"
    EXAMEN = "Examen"
    VIDEO = "Vidéo"
    RESUME = "Résumé"

class VideoKindEnum(str, Enum):
    EMBED = "embed"
    LINK = "link"
