"""Health subsystem: source-tree detectors, runner, score history, notifications."""

from .history import HistoryStore
from .layout import ProjectLayout
from .models import CheckResult, HealthCheck, HealthCheckResult, HistoryPoint, Status
from .notifications import Notification, NotificationConfig, NotificationEngine, NotificationType
from .runner import HealthRunner
