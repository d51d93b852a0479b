# ensport_backend/models/__init__.py
# Centralized imports for all database models and schemas

# Match
from .match_model import (
    Match, MatchStatus, Winner, STATUS_ORDER,
    MatchCreate, MatchUpdate, MatchResultUpdate, MatchRead, MatchNotificationRequest,
    SampleEmailRequest
)

# Users
from .user_model import User, UserRole, LoginRequest, UserCreate, UserUpdate, UserRead

# Subscribers
from .subscriber_model import Subscriber, SubscribeRequest, SubscriberRead

# Banners
from .banner_model import Banner

# Activity log
from .activity_log_model import ActivityLog, ActivityAction, ACTION_GROUPS

# Sports
from .sport_model import Sport
