# app/board/board.py
"""The ticket board as the presentation layer sees it.

``Board`` is built once at startup around a persistence gateway and loaded
explicitly with ``await board.load()``. It owns the step and ticket
registries, the numbering policy, the custom palette and the settings
session (change ledger, save/discard, undo of step deletes,
export/import).
"""
import logging

from app.board.colors import CustomPalette
from app.board.entities import Step, Ticket
from app.board.errors import BoardValidationError, GatewayError
from app.board.gateway import PersistenceGateway
from app.board.ledger import ChangeLedger
from app.board.notices import LogNotifier, Notifier
from app.board.numbering import NumberingPolicy
from app.board.registry import UpdatePolicy
from app.board.steps import StepRegistry
from app.board.tickets import TicketRegistry
from app.board.transfer import SettingsDocument, StepEntry, load_settings
from app.core.config import Settings, get_settings
from app.ticket.colors import DEFAULT_COLOR

logger = logging.getLogger(__name__)


class Board:
    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        numbering: NumberingPolicy | None = None,
    ):
        settings = settings or get_settings()
        self.notifier = notifier or LogNotifier()
        self.policy = UpdatePolicy.ROLLBACK_ON_FAILURE if settings.ROLLBACK_ON_FAILURE else UpdatePolicy.NO_ROLLBACK
        self.numbering = numbering or NumberingPolicy(
            sequential=settings.SEQUENTIAL_NUMBERING,
            max_attempts=settings.RANDOM_NUMBER_ATTEMPTS,
        )
        self.steps = StepRegistry(gateway.steps, self.notifier, self.policy)
        self.tickets = TicketRegistry(
            gateway.tickets,
            self.steps,
            self.numbering,
            self.notifier,
            self.policy,
            notes_delay=settings.NOTES_DEBOUNCE_SECONDS,
        )
        self.ledger = ChangeLedger()
        self.custom_colors = CustomPalette()
        self._stop_ledger = None

    async def load(self) -> None:
        try:
            await self.steps.load()
            await self.tickets.load()
        except GatewayError as exc:
            logger.error("Error loading board: %s", exc)
            self.notifier.error("Failed to load the board. Make sure the server is running.")
            raise

    async def aclose(self) -> None:
        await self.tickets.drain_notes()

    # tickets

    async def add_ticket(self) -> Ticket | None:
        return await self.tickets.create()

    async def delete_tickets(self, ticket_ids) -> bool:
        """Delete the selected tickets once the user confirms."""
        ids = list(dict.fromkeys(ticket_ids))
        if not ids:
            return False
        plural = "s" if len(ids) > 1 else ""
        confirmed = await self.notifier.confirm(f"Delete {len(ids)} Ticket{plural}?", "This action cannot be undone.")
        if not confirmed:
            return False
        await self.tickets.delete_many(ids)
        return True

    def set_sequential_numbering(self, enabled: bool) -> None:
        self.numbering.sequential = bool(enabled)

    # custom colors

    def add_custom_color(self, color: str) -> str:
        return self.custom_colors.add(color)

    async def apply_custom_color(self, ticket_id: int, color: str) -> bool:
        color = self.add_custom_color(color)
        return await self.tickets.set_color(ticket_id, color)

    async def remove_custom_color(self, color: str) -> bool:
        if not self.custom_colors.remove(color):
            return False
        await self.tickets.recolor(color.lower(), DEFAULT_COLOR)
        return True

    async def clear_custom_colors(self) -> bool:
        confirmed = await self.notifier.confirm(
            "Clear All Custom Colors?", "This will remove all custom colors from your palette."
        )
        if not confirmed:
            return False
        await self.tickets.recolor(None, DEFAULT_COLOR)
        self.custom_colors.clear()
        return True

    # settings session

    @property
    def settings_open(self) -> bool:
        return self._stop_ledger is not None

    def open_settings(self) -> None:
        if self.settings_open:
            return
        self.ledger.open(self.steps)
        self._stop_ledger = self.steps.listen(self.ledger)

    def _end_settings(self) -> None:
        if self._stop_ledger is not None:
            self._stop_ledger()
            self._stop_ledger = None

    async def save_settings(self, names: dict[int, str] | None = None) -> list[str]:
        failed = await self.steps.rename_many(names or {})
        self.ledger.commit(self.steps)
        return failed

    async def discard_settings(self) -> None:
        self._end_settings()
        self.ledger.discard()
        await self.load()

    async def close_settings(self) -> bool:
        """End the session; returns ``False`` if the user chose to keep editing."""
        if self.ledger.is_dirty():
            changes = "\n".join(f"- {description}" for description in self.ledger.descriptions)
            message = f"Changes made:\n{changes}" if changes else "Step names were edited."
            if not await self.notifier.confirm("Discard Changes?", message):
                return False
            await self.discard_settings()
            return True
        self._end_settings()
        return True

    async def undo_step_delete(self) -> Step | None:
        snapshot = self.ledger.pop_undo()
        if snapshot is None:
            return None
        stop = self._stop_ledger
        self._stop_ledger = None
        if stop is not None:
            stop()
        try:
            step = await self.steps.restore(snapshot)
        finally:
            if stop is not None:
                self._stop_ledger = self.steps.listen(self.ledger)
        if step is not None:
            self.ledger.record("restored", f'Restored step: "{step.name or "Unnamed"}"', step)
        return step

    # export / import

    def export_settings(self) -> SettingsDocument:
        return SettingsDocument(
            steps=[StepEntry(name=step.name, order_index=step.order_index) for step in self.steps],
            custom_colors=list(self.custom_colors),
            sequential_numbering=self.numbering.sequential,
        )

    async def import_settings(self, document: SettingsDocument | str | bytes) -> bool:
        """Replace the steps and custom colors with an exported document."""
        if not isinstance(document, SettingsDocument):
            try:
                document = load_settings(document)
            except BoardValidationError as exc:
                logger.warning("Rejected settings file: %s", exc.__cause__)
                self.notifier.error(str(exc))
                return False
        confirmed = await self.notifier.confirm(
            "Import Settings?", "This will replace your current steps and custom colors."
        )
        if not confirmed:
            return False

        self.custom_colors.replace(document.custom_colors)
        if document.sequential_numbering is not None:
            self.set_sequential_numbering(document.sequential_numbering)
        for step in self.steps:
            await self.steps.delete(step.id)
        for entry in sorted(document.steps, key=lambda entry: entry.order_index):
            await self.steps.create(entry.name)

        await self.load()
        self.notifier.info("Settings imported successfully!")
        return True
