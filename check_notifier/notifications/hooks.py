"""Dashboard integration hooks for the per-check recipient override.

Both hooks only touch ``http`` and ``https`` checks; other check types are
left alone.
"""

from typing import Any, List, Mapping, Optional

from check_notifier.domain.models import ALERT_EMAIL_PARAM, EDITABLE_CHECK_TYPES, Check
from check_notifier.logging import get_logger

from .recipients import validate_recipient_override
from .templates import EDIT_FORM_TEMPLATE, TemplateRenderer

logger = get_logger(__name__, component="dashboard")


class DashboardHooks:
    """Captures the ``alert_email`` override and adds its field to the edit form."""

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self.renderer = renderer or TemplateRenderer()

    def capture_alert_email(
        self,
        check: Check,
        dirty_fields: Mapping[str, Any],
        check_type: str,
    ) -> None:
        """Validate and store a submitted override.

        An absent or empty ``alert_email`` leaves the stored value as it is.
        The original comma-joined string is stored, not a normalized form.

        Raises:
            InvalidRecipientError: If any entry is not a valid address; the
                check is not modified
        """
        if check_type not in EDITABLE_CHECK_TYPES:
            return

        alert_email = dirty_fields.get(ALERT_EMAIL_PARAM)
        if not alert_email:
            return

        try:
            validate_recipient_override(alert_email)
        except ValueError:
            logger.warning(
                f"Rejected alert_email override for check {check.id}",
                extra={"event": "override.rejected", "check_id": check.id},
            )
            raise

        check.set_poller_param(ALERT_EMAIL_PARAM, alert_email)
        logger.info(
            f"Stored alert_email override for check {check.id}: {alert_email}",
            extra={"event": "override.stored", "check_id": check.id},
        )

    def augment_edit_form(self, check_type: str, check: Check, partials: List[str]) -> None:
        """Append the override form field to the edit page fragments."""
        if check_type not in EDITABLE_CHECK_TYPES:
            return
        partials.append(self.renderer.render_fragment(EDIT_FORM_TEMPLATE, {"check": check}))
