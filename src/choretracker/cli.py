"""Command line entry points: the interactive session and the API server."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, Sequence

from .config import HOST, PORT
from .exceptions import ChoreTrackerError, ValidationError
from .models import Role
from .money import format_currency, require_positive, to_amount
from .persistence import Chore
from .service import ChoreTracker

TIMING_CHOICES = {"1": "daily", "2": "adhoc", "3": "weekly"}


class SessionClosed(Exception):
    """Raised when the input stream ends mid-session."""


def _describe(chore: Chore) -> str:
    return f"{chore.emoji} {chore.name}"


class InteractiveSession:
    """Menu driven prompt loop over a :class:`ChoreTracker`.

    ``ask`` and ``say`` default to :func:`input` and :func:`print` and can be
    swapped for scripted callables.
    """

    def __init__(
        self,
        tracker: ChoreTracker,
        *,
        ask: Callable[[str], str] = input,
        say: Callable[[str], None] = print,
    ) -> None:
        self.tracker = tracker
        self._ask = ask
        self._say = say

    def ask(self, question: str) -> str:
        try:
            return self._ask(question).strip()
        except EOFError as exc:
            raise SessionClosed() from exc

    def say(self, message: str = "") -> None:
        self._say(message)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> int:
        self.say("🧼 Welcome to the Chore Tracker\n")
        try:
            while True:
                name = self.ask("What is your name? (or type 'exit' to quit): ")
                if not name or name.lower() == "exit":
                    break
                user = self.tracker.login(name)
                role = Role(user.role)
                self.say(f"\nHello, {user.name}! You are logged in as a {role.value.upper()}.\n")
                menu = self.parent_menu if role is Role.PARENT else self.child_menu
                if not menu(user.name):
                    break
        except SessionClosed:
            pass
        self.say("Goodbye!")
        return 0

    def parent_menu(self, parent_name: str) -> bool:
        """Run the parent menu; return ``False`` when the user quits."""

        while True:
            self.say(f"\n👩‍👧 Parent menu ({parent_name})")
            self.say("  1) Set up a new chore")
            self.say("  2) View chore report")
            self.say("  3) Reconcile allowance")
            self.say("  4) Switch user")
            self.say("  5) Exit")
            choice = self.ask("Choose an option: ")
            if choice == "1":
                self.create_chore()
            elif choice == "2":
                self.view_report()
            elif choice == "3":
                self.reconcile()
            elif choice == "4":
                return True
            elif choice == "5":
                return False
            else:
                self.say("Please choose a valid option.")

    def child_menu(self, child_name: str) -> bool:
        """Run the child menu; return ``False`` when the user quits."""

        while True:
            balance = self.tracker.get_user(child_name).balance
            self.say(f"\n🧒 Child menu ({child_name})")
            self.say(f"  Your balance: {format_currency(balance)}")
            self.say("  1) View my completed chores")
            self.say("  2) Complete a chore")
            self.say("  3) Switch user")
            self.say("  4) Exit")
            choice = self.ask("Choose an option: ")
            if choice == "1":
                self.view_my_completions(child_name)
            elif choice == "2":
                self.complete_chore(child_name)
            elif choice == "3":
                return True
            elif choice == "4":
                return False
            else:
                self.say("Please choose a valid option.")

    # ------------------------------------------------------------------
    # Parent flows
    # ------------------------------------------------------------------
    def create_chore(self) -> Chore:
        self.say("\n🧹 Create a new chore")
        name = ""
        while not name:
            name = self.ask("Chore name: ")
            if not name:
                self.say("Please enter a chore name.")

        timing = ""
        while timing not in TIMING_CHOICES:
            self.say("Timing options:")
            self.say("  1) Daily")
            self.say("  2) Ad-hoc")
            self.say("  3) Weekly")
            timing = self.ask("Choose timing (1/2/3): ")

        price: Optional[float] = None
        while price is None:
            raw = self.ask("Price for performing this chore (e.g. 1.50): ")
            try:
                price = require_positive(to_amount(raw, field="price"), allow_zero=True, field="price")
            except ValidationError:
                self.say("Please enter a valid number.")

        emoji = self.ask("Emoji for this chore (e.g. 🧼): ")

        answer = ""
        while answer not in ("y", "n"):
            answer = self.ask("Is this chore required to qualify for allowance? (y/n): ").lower()

        chore = self.tracker.create_chore(name, TIMING_CHOICES[timing], price, emoji=emoji, required=answer == "y")
        self.say("\n✅ New chore created:")
        self.say(
            f"  #{chore.id} {_describe(chore)} [{chore.timing}] - {format_currency(chore.price)}"
            + (" (required)" if chore.required else "")
        )
        return chore

    def view_report(self) -> None:
        self.say("\n📊 Chore report for the last 7 days\n")
        reports = self.tracker.report()
        if not reports:
            self.say("No children have logged in yet.\n")
            return
        for report in reports:
            self.say(f"Child: {report.child_name}")
            for item in report.items:
                self.say(
                    f"  - {_describe(item.chore)} ({item.chore.timing}) x {item.count} = "
                    f"{format_currency(item.value)}"
                )
            if report.total == 0:
                self.say("  (no chores completed in the last week)")
            else:
                self.say(f"  ▶ Total value: {format_currency(report.total)}")
            self.say("")

    def reconcile(self) -> None:
        self.say("\n💸 Reconcile allowance")
        summary = self.tracker.reconcile_summary()
        if not summary:
            self.say("No children to reconcile.\n")
            return

        self.say("Children summary (last 7 days):")
        for index, line in enumerate(summary, start=1):
            self.say(
                f"  {index}) {line.child_name} - earned: {format_currency(line.earned)}, "
                f"current balance: {format_currency(line.current_balance)}"
            )

        choice = self.ask("\nSelect a child to transfer allowance to (or press Enter to go back): ")
        if not choice:
            return
        try:
            index = int(choice) - 1
        except ValueError:
            index = -1
        if index < 0 or index >= len(summary):
            self.say("Invalid choice.\n")
            return

        target = summary[index]
        if target.earned == 0:
            self.say(
                f"{target.child_name} has no earned chores in the last week. "
                "You can still manually add money if you want."
            )
        raw = self.ask(f"Amount to transfer to {target.child_name} (default {target.earned:.2f}): ")
        try:
            transfer = self.tracker.reconcile(target.child_name, raw if raw else target.earned)
        except ChoreTrackerError:
            self.say("No valid transfer made.\n")
            return
        self.say(
            f"✅ Transferred {format_currency(transfer.amount)} to {transfer.child_name}. "
            f"New balance: {format_currency(transfer.new_balance)}\n"
        )

    # ------------------------------------------------------------------
    # Child flows
    # ------------------------------------------------------------------
    def view_my_completions(self, child_name: str) -> None:
        self.say(f"\n📋 Chores completed by {child_name} in the last 7 days:\n")
        report = self.tracker.child_report(child_name).report
        if not report.items:
            self.say("You haven't completed any chores in the last week yet.\n")
            return
        for item in report.items:
            self.say(
                f"  - {_describe(item.chore)} ({item.chore.timing}) x {item.count} = "
                f"{format_currency(item.value)}"
            )
        self.say(f"\n▶ Total potential value this week: {format_currency(report.total)}\n")
        self.say("Note: This is *potential* – the parent still needs to reconcile to move it to your balance.\n")

    def complete_chore(self, child_name: str) -> None:
        self.say("\n✅ Complete a chore")
        chores = self.tracker.list_chores()
        if not chores:
            self.say("There are no chores available yet. Ask a parent to add some.\n")
            return

        self.say("Available chores:")
        for index, chore in enumerate(chores, start=1):
            self.say(
                f"  {index}) {_describe(chore)} [{chore.timing}] - {format_currency(chore.price)}"
                + (" (required)" if chore.required else "")
            )

        choice = self.ask("\nWhich chore did you complete? (number or Enter to cancel): ")
        if not choice:
            return
        try:
            index = int(choice) - 1
        except ValueError:
            index = -1
        if index < 0 or index >= len(chores):
            self.say("Invalid choice.\n")
            return

        _, chore = self.tracker.record_completion(child_name, chores[index].id)
        self.say(f"🎉 Nice work, {child_name}! Recorded completion of: {_describe(chore)}\n")


# ----------------------------------------------------------------------
# Entry point
# ----------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="choretracker", description="Track household chores and allowance")
    subcommands = parser.add_subparsers(dest="command")
    subcommands.add_parser("interactive", help="Run the interactive menu session (default)")
    serve = subcommands.add_parser("serve", help="Serve the HTTP API")
    serve.add_argument("--host", default=HOST, help="Interface to bind")
    serve.add_argument("--port", type=int, default=PORT, help="Port to listen on")
    return parser


def serve(host: str, port: int) -> int:
    import uvicorn

    from .webapp import get_app

    print(f"Chore Tracker running at http://{host}:{port}")
    uvicorn.run(get_app(), host=host, port=port)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    if args.command == "serve":
        return serve(args.host, args.port)

    tracker = ChoreTracker()
    try:
        return InteractiveSession(tracker).run()
    except KeyboardInterrupt:
        print("\nGoodbye!")
        return 0
    except Exception as exc:
        tracker.logger.log("unexpected_error", error=repr(exc))
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1


__all__: List[str] = ["InteractiveSession", "SessionClosed", "build_parser", "main", "serve"]
