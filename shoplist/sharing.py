"""Export and share boundaries for finalized shopping lists."""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

from .assembler import ShoppingListAssembler
from .formatting import to_markdown, to_text, write_atomic
from .models import ShoppingListItem

logger = logging.getLogger(__name__)


class ShareError(RuntimeError):
    """An export or share attempt failed; the list can be resubmitted."""


class ShareBusyError(ShareError):
    """Another export or share request is still in flight."""


class ListExporter(Protocol):
    async def export_list(self, items: list[ShoppingListItem]) -> None: ...


class EmailSharer(Protocol):
    async def share_via_email(self, items: list[ShoppingListItem], address: str) -> None: ...


class SmsSharer(Protocol):
    async def share_via_sms(self, items: list[ShoppingListItem], phone_number: str) -> None: ...


class ShareSession:
    """Run export/share calls one at a time.

    Only a single request may be outstanding; a second one is rejected with
    ShareBusyError. Failures are recorded in ``last_error`` and re-raised as
    ShareError. The items handed in are never modified, so a failed call can
    be retried with the same list.
    """

    def __init__(
        self,
        exporter: Optional[ListExporter] = None,
        email: Optional[EmailSharer] = None,
        sms: Optional[SmsSharer] = None,
    ):
        self.exporter = exporter
        self.email = email
        self.sms = sms
        self.busy = False
        self.last_error: Optional[Exception] = None

    async def _submit(self, action: str, call: Callable[[], Awaitable[None]]):
        if self.busy:
            raise ShareBusyError(f"Cannot {action}: another request is in progress")

        self.busy = True
        self.last_error = None
        try:
            await call()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.last_error = e
            logger.error("Error during %s: %s", action, e)
            raise ShareError(f"Failed to {action}: {e}") from e
        finally:
            self.busy = False

        logger.info("Completed %s", action)

    async def export(self, items: list[ShoppingListItem]):
        """Hand the finalized list to the configured exporter."""
        if self.exporter is None:
            raise ShareError("No exporter configured")
        snapshot = list(items)
        await self._submit("export shopping list", lambda: self.exporter.export_list(snapshot))

    async def share_via_email(self, items: list[ShoppingListItem], address: str):
        if self.email is None:
            raise ShareError("No email sharer configured")
        if not address or "@" not in address:
            raise ShareError(f"Invalid email address: {address!r}")
        snapshot = list(items)
        await self._submit(
            "share shopping list via email",
            lambda: self.email.share_via_email(snapshot, address),
        )

    async def share_via_sms(self, items: list[ShoppingListItem], phone_number: str):
        if self.sms is None:
            raise ShareError("No SMS sharer configured")
        if not phone_number or not any(ch.isdigit() for ch in phone_number):
            raise ShareError(f"Invalid phone number: {phone_number!r}")
        snapshot = list(items)
        await self._submit(
            "share shopping list via SMS",
            lambda: self.sms.share_via_sms(snapshot, phone_number),
        )


class MarkdownFileExporter:
    """Write the finalized list to a markdown checklist file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def render(self, items: list[ShoppingListItem]) -> str:
        return to_markdown(ShoppingListAssembler().assemble(items))

    async def export_list(self, items: list[ShoppingListItem]) -> None:
        content = self.render(items)
        await asyncio.to_thread(write_atomic, self.path, content)


class TextFileExporter(MarkdownFileExporter):
    """Write the finalized list as a plain-text file, ready to paste into a message."""

    def render(self, items: list[ShoppingListItem]) -> str:
        return to_text(items)
