from .user import User, Role
from .meeting import MeetingRequest, MeetingStatus
from .announcement import Announcement
from .course import Course, CourseStatus, Module, ContentItem, ContentType
