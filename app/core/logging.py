import logging
import json
from datetime import datetime, timezone
from fastapi import Request
from app.config import settings


def get_client_ip(request: Request) -> str:
    return (
        request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        or request.headers.get("x-real-ip", "")
        or getattr(request.client, "host", "unknown")
        if request.client
        else "unknown"
    )


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "unknown")


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

auth_logger = logging.getLogger("auth")
admin_logger = logging.getLogger("admin")
activity_logger = logging.getLogger("activity")


class SecurityLogger:
    @staticmethod
    def log_login_attempt(
        request: Request,
        email: str,
        success: bool,
        user_id: int | None = None,
        failure_reason: str | None = None,
    ):
        log_data: dict[str, object] = {
            "event_type": "login_attempt",
            "email": email,
            "success": success,
            "ip_address": get_client_ip(request),
            "user_agent": get_user_agent(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if user_id:
            log_data["user_id"] = user_id
        if failure_reason:
            log_data["failure_reason"] = failure_reason

        message = (
            f"Login {'successful' if success else 'failed'}: {json.dumps(log_data)}"
        )

        if success:
            auth_logger.info(message)
        else:
            auth_logger.warning(message)

    @staticmethod
    def log_registration(
        request: Request,
        email: str,
        user_id: int | None = None,
        success: bool = True,
        failure_reason: str | None = None,
    ):
        log_data: dict[str, object] = {
            "event_type": "user_registration",
            "email": email,
            "success": success,
            "ip_address": get_client_ip(request),
            "user_agent": get_user_agent(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if user_id:
            log_data["user_id"] = user_id
        if failure_reason:
            log_data["failure_reason"] = failure_reason

        message = f"Registration {'successful' if success else 'failed'}: {json.dumps(log_data)}"

        if success:
            auth_logger.info(message)
        else:
            auth_logger.warning(message)

    @staticmethod
    def log_admin_action(
        request: Request,
        admin_user_id: int,
        action: str,
        target_user_id: int | None = None,
        details: dict[str, object] | None = None,
    ):
        log_data: dict[str, object] = {
            "event_type": "admin_action",
            "admin_user_id": admin_user_id,
            "action": action,
            "ip_address": get_client_ip(request),
            "user_agent": get_user_agent(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if target_user_id:
            log_data["target_user_id"] = target_user_id
        if details:
            log_data.update(details)

        message = f"Admin action - {action}: {json.dumps(log_data)}"
        admin_logger.info(message)


class ActivityLogger:
    """Audit trail for community actions that change shared state."""

    @staticmethod
    def log_exchange_transition(
        exchange_id: int,
        user_id: int,
        role: str,
        from_status: str,
        to_status: str,
        success: bool,
        reason: str | None = None,
    ):
        log_data: dict[str, object] = {
            "event_type": "exchange_transition",
            "exchange_id": exchange_id,
            "user_id": user_id,
            "role": role,
            "from_status": from_status,
            "to_status": to_status,
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if reason:
            log_data["reason"] = reason

        message = f"Exchange transition {'applied' if success else 'rejected'}: {json.dumps(log_data)}"

        if success:
            activity_logger.info(message)
        else:
            activity_logger.warning(message)

    @staticmethod
    def log_exchange_created(
        exchange_id: int, post_id: int, helper_id: int, requester_id: int, status: str
    ):
        log_data: dict[str, object] = {
            "event_type": "exchange_created",
            "exchange_id": exchange_id,
            "post_id": post_id,
            "helper_id": helper_id,
            "requester_id": requester_id,
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        activity_logger.info(f"Exchange created: {json.dumps(log_data)}")

    @staticmethod
    def log_emergency_posted(post_id: int, user_id: int, location: str):
        log_data: dict[str, object] = {
            "event_type": "emergency_posted",
            "post_id": post_id,
            "user_id": user_id,
            "location": location,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        activity_logger.warning(f"🚨 Emergency posted: {json.dumps(log_data)}")
