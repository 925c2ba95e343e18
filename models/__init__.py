"""ORM models and view records exposed by the dashboard core."""
from .task import CustomTask
from .subtask import Subtask
from .course_color import CourseColor
from .task_item import TaskItem

__all__ = ["CustomTask", "Subtask", "CourseColor", "TaskItem"]
