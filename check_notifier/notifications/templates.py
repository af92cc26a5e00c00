"""Template rendering for notification emails using Jinja2.

Each event kind has one text template named ``<kind>.txt``. The first
rendered line is the email subject; every following line, rejoined with
``\\n``, is the body. All bundled templates follow that layout and custom
templates must too.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from check_notifier.domain.models import RenderedMessage

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

EDIT_FORM_TEMPLATE = "details_edit.html"


class TemplateRenderer:
    """Renders event emails and dashboard fragments.

    Templates are looked up in ``search_path`` first, when given, then in the
    ``email_templates`` directory bundled with this package. Text templates
    are not autoescaped; ``.html`` fragments are.
    """

    def __init__(
        self,
        search_path: Optional[Union[str, Path]] = None,
        template_dir: str = "email_templates",
    ):
        loaders = [PackageLoader("check_notifier.notifications", template_dir)]
        if search_path:
            loaders.insert(0, FileSystemLoader(str(search_path)))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(f"Initialized TemplateRenderer (custom search path: {search_path or 'none'})")

    @staticmethod
    def template_name_for(event_kind: str) -> str:
        return f"{event_kind}.txt"

    def has_template(self, event_kind: str) -> bool:
        try:
            self.env.get_template(self.template_name_for(event_kind))
        except TemplateNotFound:
            return False
        return True

    def render(self, event_kind: str, context: Dict[str, Any]) -> RenderedMessage:
        """Render the template for ``event_kind`` and split subject from body.

        Raises:
            NotificationTemplateError: If no template exists for the kind or
                rendering fails
        """
        name = self.template_name_for(event_kind)

        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise NotificationTemplateError(
                f"No email template for event kind '{event_kind}'",
                errors=[f"Template not found: {name}"],
                suggestions=["Disable this event kind or provide a template for it"],
            ) from e

        try:
            text = template.render(context)
        except TemplateError as e:
            raise NotificationTemplateError(
                f"Template rendering failed for event kind '{event_kind}': {e}"
            ) from e

        subject, _, body = text.partition("\n")
        return RenderedMessage(subject=subject.rstrip("\r"), body=body)

    def render_fragment(self, name: str, context: Dict[str, Any]) -> str:
        """Render an auxiliary (HTML) template such as the edit form field.

        Raises:
            NotificationTemplateError: If the template is missing or fails
        """
        try:
            return self.env.get_template(name).render(context)
        except TemplateNotFound as e:
            raise NotificationTemplateError(f"Template not found: {name}") from e
        except TemplateError as e:
            raise NotificationTemplateError(f"Template rendering failed for {name}: {e}") from e
