from datetime import datetime

import pytest

from program_ingester.records import Record

PRODUCTIVITY_SUITE = """\
2023-01-01T00:00:00.000Z 2023-12-31T00:00:00.000Z program_1 In_Progress Team_A null->Productivity_Suite
2023-01-01T00:00:00.000Z 2023-06-30T00:00:00.000Z program_1 Complete Team_B Productivity_Suite->Email
2023-01-01T00:00:00.000Z 2023-06-30T00:00:00.000Z program_1 Complete Team_C Productivity_Suite->Calendar
2023-07-01T00:00:00.000Z 2023-12-31T00:00:00.000Z program_1 In_Progress Team_D Productivity_Suite->Task_Manager
2023-01-01T00:00:00.000Z 2023-04-30T00:00:00.000Z program_1 Complete Team_B Email->Email_Search
2023-05-01T00:00:00.000Z 2023-06-30T00:00:00.000Z program_1 Complete Team_B Email->Email_Filters
2023-01-01T00:00:00.000Z 2023-04-30T00:00:00.000Z program_1 Complete Team_C Calendar->Calendar_Scheduling
2023-05-01T00:00:00.000Z 2023-06-30T00:00:00.000Z program_1 Complete Team_C Calendar->Calendar_Reminders
2023-07-01T00:00:00.000Z 2023-09-30T00:00:00.000Z program_1 Complete Team_D Task_Manager->Task_Manager_To_Do_List
2023-10-01T00:00:00.000Z 2023-12-31T00:00:00.000Z program_1 In_Progress Team_D Task_Manager->Task_Manager_Project_Management
2022-06-01T00:00:00.000Z 2022-12-31T00:00:00.000Z program_2 Complete Team_E null->Billing
2022-06-01T00:00:00.000Z 2022-08-31T00:00:00.000Z program_2 Complete Team_E Billing->Invoices
"""


def _make_record(
    ident: str,
    parent: str | None = None,
    *,
    program: str = "p1",
    status: str = "Complete",
    team: str = "Team_A",
    start: str = "2023-01-01T00:00:00+00:00",
    end: str = "2023-12-31T00:00:00+00:00",
) -> Record:
    return Record(
        id=ident,
        parent_id=parent,
        program_id=program,
        status=status,
        team=team,
        start=datetime.fromisoformat(start),
        end=datetime.fromisoformat(end),
    )


@pytest.fixture()
def make_record():
    return _make_record


@pytest.fixture()
def suite_lines() -> list[str]:
    return PRODUCTIVITY_SUITE.splitlines()


@pytest.fixture()
def suite_path(tmp_path):
    path = tmp_path / "features.log"
    path.write_text(PRODUCTIVITY_SUITE)
    return path
