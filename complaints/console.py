"""
Menu-driven text interface over the ComplaintStore.

Input and output are injected callables so the whole loop can be driven
from tests with a scripted list of answers.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from complaints.domain import ComplaintStatus, IssueCategory
from complaints.services.complaint_store import ComplaintStore

HOTSPOT_THRESHOLD = 3

BANNER = "\n".join(
    [
        "==================================================",
        "  COMMUNITY COMPLAINT LOGGER & PATTERN ANALYZER",
        "==================================================",
    ]
)

MAIN_MENU = "\n".join(
    [
        "",
        "--- COMPLAINT TRACKING SYSTEM ---",
        "1. Log New Complaint",
        "2. View All Active & Closed Complaints",
        "3. Change Complaint Status (Review/Close)",
        "4. Generate Trend Report (Analyze Hotspots)",
        "5. Manual Data Backup/Restore (File I/O)",
        "6. Shut Down Application",
        "---------------------------------",
    ]
)

DATA_MENU = "\n".join(
    [
        "",
        "--- DATA PERSISTENCE & BACKUP OPTIONS ---",
        "1. Manually Save Current Data to File Backup",
        "2. Manually Restore Data From File Backup",
        "3. Back to Main Menu",
    ]
)

# statuses offered when updating; SUBMITTED is never a target from the menu
UPDATE_TARGETS = (ComplaintStatus.IN_REVIEW, ComplaintStatus.CLOSED)

SHUTDOWN_CHOICE = 6


def format_trend_report(report: Mapping[IssueCategory, int]) -> list[str]:
    """Render the open-complaint counts, busiest category first."""
    order = list(IssueCategory)
    rows = sorted(report.items(), key=lambda item: (-item[1], order.index(item[0])))
    lines = [f"{'PROBLEM CATEGORY':<25s} | OPEN COUNT", "--------------------------|-----------"]
    for category, count in rows:
        flag = " (HIGH HOTSPOT!)" if count > HOTSPOT_THRESHOLD else ""
        lines.append(f"{category.value:<25s} | {count:<10d}{flag}")
    lines.append("--------------------------|-----------")
    return lines


class ComplaintConsole:
    def __init__(
        self,
        store: ComplaintStore,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.store = store
        self._input = input_func or input
        self._out = output or print
        self._actions = {
            1: self.log_new_complaint,
            2: self.display_all_complaints,
            3: self.change_complaint_status,
            4: self.show_trend_report,
            5: self.handle_data_menu,
        }

    def _ask(self, prompt: str) -> str:
        return self._input(prompt)

    def _ask_int(self, prompt: str) -> int:
        """Read an integer; raises ValueError on anything else."""
        return int(self._ask(prompt).strip())

    # -------------------------- main loop --------------------------
    def run(self) -> None:
        self._out(BANNER)
        while True:
            self._out(MAIN_MENU)
            try:
                choice = self._ask_int("Enter your menu selection (1-6): ")
            except ValueError:
                self._out("\nInput Error: Please enter a valid number for your choice.")
                continue
            except (EOFError, KeyboardInterrupt):
                self.close_application()
                return

            if choice == SHUTDOWN_CHOICE:
                self.close_application()
                return
            action = self._actions.get(choice)
            if action is None:
                self._out("\nUnknown selection. Please enter a number from the menu.")
                continue
            try:
                action()
            except (EOFError, KeyboardInterrupt):
                self.close_application()
                return

    # -------------------------- actions --------------------------
    def log_new_complaint(self) -> None:
        self._out("\n--- NEW COMPLAINT LOG ---")
        try:
            zone_number = self._ask_int("Enter Zone Number (e.g., 1-10): ")
            details = self._ask("Enter Complaint Details (brief description): ")

            self._out("\nSelect Category:")
            categories = list(IssueCategory)
            for index, category in enumerate(categories, start=1):
                self._out(f"{index}. {category.label}")
            category_choice = self._ask_int("Enter the category number: ")
        except ValueError:
            self._out("Invalid input for Zone Number or Category. Please try again.")
            return

        if not 1 <= category_choice <= len(categories):
            self._out("Invalid category selection. Operation cancelled.")
            return

        tracking_id = self.store.log_complaint(zone_number, details, categories[category_choice - 1])
        self._out(f"New Complaint Logged. Tracking ID: {tracking_id}")

    def display_all_complaints(self) -> None:
        self._out("\n--- FULL COMPLAINTS LIST ---")
        complaints = self.store.list_all()
        if not complaints:
            self._out("No complaints currently logged in the system.")
            return
        for complaint in complaints:
            self._out(complaint.summary())

    def change_complaint_status(self) -> None:
        self._out("\n--- UPDATE COMPLAINT STATUS ---")
        try:
            tracking_id = self._ask_int("Enter the Tracking ID to update: ")
            self._out("\nSelect New Status:")
            for index, status in enumerate(UPDATE_TARGETS, start=1):
                self._out(f"{index}. {status.label}")
            status_choice = self._ask_int("Enter status number (1 or 2): ")
        except ValueError:
            self._out("Invalid input for Tracking ID. Update failed.")
            return

        if not 1 <= status_choice <= len(UPDATE_TARGETS):
            self._out("Invalid status selection. Update cancelled.")
            return
        new_status = UPDATE_TARGETS[status_choice - 1]

        if self.store.update_status(tracking_id, new_status):
            self._out(f"Tracking ID {tracking_id} status updated to {new_status.value}.")
        else:
            self._out(f"Complaint Tracking ID {tracking_id} not found.")

    def show_trend_report(self) -> None:
        self._out("\n--- PATTERN ANALYSIS: OPEN COMPLAINT TRENDS ---")
        self._out("Counting issues that are SUBMITTED or IN_REVIEW.\n")
        report = self.store.trend_report()
        if not report:
            self._out("No open complaints to analyze.")
            return
        for line in format_trend_report(report):
            self._out(line)

    def handle_data_menu(self) -> None:
        self._out(DATA_MENU)
        try:
            choice = self._ask_int("Enter choice (1-3): ")
        except ValueError:
            self._out("Invalid Input. Returning to main menu.")
            return

        if choice == 1:
            if self.store.save_backup():
                self._out("Backup data saved to file.")
            else:
                self._out("Error writing backup file. See log for details.")
        elif choice == 2:
            if self.store.restore_backup():
                self._out("Backup data loaded from file.")
            else:
                self._out("No backup data restored (file missing or unreadable).")
        elif choice == 3:
            return
        else:
            self._out("Invalid choice.")

    def close_application(self) -> None:
        self._out("\n--- SYSTEM SHUTDOWN IN PROGRESS ---")
        report = self.store.shutdown()
        if report.ok:
            self._out("All data synchronized and backed up. Thank you.")
            return
        if not report.database_saved:
            self._out("Warning: the database could not be updated.")
        if not report.backup_saved:
            self._out("Warning: the backup file could not be written.")
