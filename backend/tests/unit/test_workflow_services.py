import asyncio

import pytest
from pydantic import ValidationError

from protrack.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    GatewayWriteError,
)
from protrack.schemas.actual_entry import ActualEntryCreate, Narration
from protrack.schemas.common import MaterialLine, PhotoUpload
from protrack.schemas.crushing import CrushingCreate
from protrack.schemas.job_card import JobCardCreate
from protrack.schemas.production_order import DemandCreate, ProductionStatus
from protrack.services.actual_entry_service import ActualEntryService
from protrack.services.approval_service import ApprovalService
from protrack.services.crushing_service import CrushingService
from protrack.services.demand_service import DemandService
from protrack.services.job_card_service import JobCardService
from tests.conftest import FIXED_NOW
from tests.fakes import actual_row

STAMP = "19/10/26 14:30:05"
MILLIS = int(FIXED_NOW.timestamp() * 1000)


class TestDemandService:
    def test_submit_demand_appends_row_and_returns_created_order(self, gateway, spreadsheet, clock):
        service = DemandService(gateway, clock=clock)

        order = asyncio.run(service.submit_demand(DemandCreate(name=" Widget ", qty=25, notes="rush")))

        assert order.serial == "SF-104"
        assert order.name == "Widget"
        assert order.pending == 25
        assert order.status == ProductionStatus.PENDING
        assert order.row_index == 8
        assert spreadsheet.sheets["Semi Production"][-1] == [
            STAMP, "SF-104", "Widget", 25, "rush", 0, 0, 25, "PENDING", "", "",
        ]

    def test_rejected_insert_raises(self, gateway, spreadsheet, clock):
        spreadsheet.rejected_actions.add("insert")

        with pytest.raises(GatewayWriteError):
            asyncio.run(DemandService(gateway, clock=clock).submit_demand(DemandCreate(name="Widget", qty=5)))

    def test_list_orders_is_aggregated(self, gateway):
        orders = {o.serial: o for o in asyncio.run(DemandService(gateway).list_orders())}

        assert orders["SF-101"].total_made == 40
        assert orders["SF-101"].total_planned == 100
        assert orders["SF-101"].status == ProductionStatus.IN_PROGRESS
        assert orders["SF-102"].status == ProductionStatus.COMPLETED
        assert orders["SF-103"].pending == 40


class TestJobCardService:
    def test_planning_board_buckets_orders(self, gateway):
        board = asyncio.run(JobCardService(gateway).planning_board())

        assert [o.serial for o in board.pending_orders] == ["SF-101"]
        assert [o.serial for o in board.history_orders] == ["SF-102"]
        assert {c.serial: c.actual_made for c in board.job_cards} == {
            "SJC-382": 40,
            "SJC-383": 0,
            "SJC-384": 50,
        }

    def test_create_job_card_for_pending_order(self, gateway, spreadsheet, clock):
        body = JobCardCreate(
            production_order_ref="SF-101", supervisor="Amit Singh", qty=25, production_date="20/10/26"
        )

        card = asyncio.run(JobCardService(gateway, clock=clock).create_job_card(body))

        assert card.serial == "SJC-385"
        assert card.product_name == "Widget"
        assert card.planned_qty == 25
        assert spreadsheet.sheets["Semi Job Card"][-1] == [
            STAMP, "SJC-385", "SF-101", "Amit Singh", "Widget", 25, "20/10/26",
        ]

    @pytest.mark.parametrize("order", ["SF-102", "SF-103"])
    def test_order_outside_planning_queue_is_rejected(self, gateway, spreadsheet, order):
        body = JobCardCreate(production_order_ref=order, supervisor="Amit Singh", qty=5, production_date="20/10/26")

        with pytest.raises(BusinessRuleViolationException):
            asyncio.run(JobCardService(gateway).create_job_card(body))
        assert spreadsheet.posted("insert") == []

    def test_unknown_order(self, gateway):
        body = JobCardCreate(production_order_ref="SF-999", supervisor="Amit Singh", qty=5, production_date="20/10/26")

        with pytest.raises(EntityNotFoundException):
            asyncio.run(JobCardService(gateway).create_job_card(body))

    def test_job_cards_for_order(self, gateway):
        cards = asyncio.run(JobCardService(gateway).job_cards_for_order("SF-101"))

        assert [c.serial for c in cards] == ["SJC-382", "SJC-383"]


class TestActualEntryService:
    def test_pending_job_cards(self, gateway):
        cards = asyncio.run(ActualEntryService(gateway).pending_job_cards())

        assert [c.serial for c in cards] == ["SJC-382"]
        assert (cards[0].actual_made, cards[0].pending_qty) == (40, 20)

    def test_log_entry_uploads_photos_and_appends_row(self, gateway, spreadsheet, clock):
        service = ActualEntryService(gateway, upload_folder_id="folder-1", clock=clock)
        body = ActualEntryCreate(
            job_card_ref="SJC-382",
            qty_produced=20,
            raw_materials=[MaterialLine(name="Raw Stone", qty=3), MaterialLine(name="  ", qty=9)],
            has_end_product=False,
            end_product=MaterialLine(name="ignored", qty=4),
            narration=Narration.BREAKDOWN,
            start_reading=1000,
            end_reading=1050,
            start_photo=PhotoUpload(base64_content="c3RhcnQ="),
            end_photo=PhotoUpload(base64_content="ZW5k"),
        )

        entry = asyncio.run(service.log_entry(body))

        assert entry.serial == "SA-004"
        assert entry.production_order_ref == "SF-101"
        assert entry.machine_running_hours == 50
        assert entry.raw_materials == [MaterialLine(name="Raw Stone", qty=3)]
        assert entry.end_product.name == ""
        assert entry.narration == "Breakdown"
        assert entry.start_photo_url == f"https://files.test/start_SJC-382_{MILLIS}.jpg"
        assert entry.end_photo_url == f"https://files.test/end_SJC-382_{MILLIS}.jpg"
        assert entry.stage1_planned_at is None
        assert {p["folderId"] for p in spreadsheet.posted("uploadFile")} == {"folder-1"}
        assert spreadsheet.sheets["Semi Actual"][-1][0] == STAMP

    def test_entry_against_closed_job_card_is_rejected(self, gateway):
        body = ActualEntryCreate(job_card_ref="SJC-383", qty_produced=1)

        with pytest.raises(BusinessRuleViolationException):
            asyncio.run(ActualEntryService(gateway).log_entry(body))

    def test_rejected_upload_stops_submission(self, gateway, spreadsheet, clock):
        spreadsheet.rejected_actions.add("uploadFile")
        body = ActualEntryCreate(
            job_card_ref="SJC-382", qty_produced=1, start_photo=PhotoUpload(base64_content="c3RhcnQ=")
        )

        with pytest.raises(GatewayWriteError):
            asyncio.run(ActualEntryService(gateway, clock=clock).log_entry(body))
        assert spreadsheet.posted("insert") == []


class TestApprovalService:
    def test_buckets(self, gateway):
        buckets = asyncio.run(ApprovalService(gateway).buckets())

        assert [e.serial for e in buckets.pending] == ["SA-001"]
        assert [e.serial for e in buckets.history] == ["SA-002"]

    def test_approve_stamps_resolved_column(self, gateway, spreadsheet, clock):
        service = ApprovalService(gateway, clock=clock)

        entry = asyncio.run(service.approve("SA-001"))

        assert entry.stage1_approved_at == STAMP
        form = spreadsheet.posted("updateCell")[-1]
        assert (form["sheetName"], form["rowIndex"], form["columnIndex"]) == ("Semi Actual", "5", "30")

        with pytest.raises(BusinessRuleViolationException):
            asyncio.run(service.approve("SA-001"))

    def test_unplanned_entry_cannot_be_approved(self, gateway):
        with pytest.raises(BusinessRuleViolationException):
            asyncio.run(ApprovalService(gateway).approve("SA-003"))

    def test_unknown_entry(self, gateway):
        with pytest.raises(EntityNotFoundException):
            asyncio.run(ApprovalService(gateway).approve("SA-999"))

    def test_repeated_serial_approves_the_pending_row(self, gateway, spreadsheet, clock):
        rows = spreadsheet.sheets["Semi Actual"]
        rows.append(actual_row("SA-010", "SJC-382", "SF-101", 5, planned1="04/10/26", actual1="05/10/26 09:00:00"))
        rows.append(actual_row("SA-010", "SJC-382", "SF-101", 5, planned1="04/10/26"))

        entry = asyncio.run(ApprovalService(gateway, clock=clock).approve("SA-010"))

        assert entry.row_index == 9
        assert spreadsheet.posted("updateCell")[-1]["rowIndex"] == "9"

    def test_two_pending_rows_with_one_serial_need_a_row(self, gateway, spreadsheet, clock):
        rows = spreadsheet.sheets["Semi Actual"]
        rows.append(actual_row("SA-010", "SJC-382", "SF-101", 5, planned1="04/10/26"))
        rows.append(actual_row("SA-010", "SJC-382", "SF-101", 5, planned1="04/10/26"))
        service = ApprovalService(gateway, clock=clock)

        with pytest.raises(BusinessRuleViolationException, match="rows 8, 9"):
            asyncio.run(service.approve("SA-010"))
        assert spreadsheet.posted("updateCell") == []

        assert asyncio.run(service.approve("SA-010", row_index=8)).row_index == 8

    def test_entry_without_serial_is_approved_by_row(self, gateway, spreadsheet, clock):
        spreadsheet.sheets["Semi Actual"].append(actual_row("", "SJC-382", "SF-101", 5, planned1="04/10/26"))

        entry = asyncio.run(ApprovalService(gateway, clock=clock).approve(row_index=8))

        assert entry.serial == ""
        assert entry.stage1_approved_at == STAMP
        with pytest.raises(EntityNotFoundException):
            asyncio.run(ApprovalService(gateway).approve(row_index=42))


class TestCrushingService:
    def _body(self, **overrides) -> CrushingCreate:
        data = {
            "source_serial": "SA-002",
            "date": "19/10/26",
            "finished_goods": [MaterialLine(name="10mm", qty=30), MaterialLine(name="", qty=0)],
            "remarks": "ok",
            "machine_running_hours": 4,
        }
        data.update(overrides)
        return CrushingCreate(**data)

    def test_jobs(self, gateway):
        jobs = asyncio.run(CrushingService(gateway).jobs())

        assert [e.serial for e in jobs.pending] == ["SA-002"]
        assert jobs.history == []

    def test_log_crushing_inserts_row_and_marks_source(self, gateway, spreadsheet, clock):
        result = asyncio.run(CrushingService(gateway, clock=clock).log_crushing(self._body()))

        assert result.source_marked is True
        entry = result.entry
        assert entry.serial == STAMP
        assert entry.product_name == "Widget"
        assert entry.production_date == "03/10/26"
        assert entry.input_qty == 50
        assert entry.finished_goods == [MaterialLine(name="10mm", qty=30)]
        assert spreadsheet.sheets["Crushing_actual"][-1][:5] == [STAMP, "19/10/26", "03/10/26", "Widget", 50]
        form = spreadsheet.posted("updateCell")[-1]
        assert (form["rowIndex"], form["columnIndex"], form["value"]) == ("6", "32", STAMP)

        jobs = asyncio.run(CrushingService(gateway).jobs())
        assert [e.serial for e in jobs.history] == ["SA-002"]

    def test_explicit_product_and_photos(self, gateway, clock):
        body = self._body(
            crushing_product_name="Gravel",
            production_date="01/10/26",
            start_photo=PhotoUpload(base64_content="c3RhcnQ="),
        )

        entry = asyncio.run(CrushingService(gateway, clock=clock).log_crushing(body)).entry

        assert entry.product_name == "Gravel"
        assert entry.production_date == "01/10/26"
        assert entry.start_photo_url == f"https://files.test/START_SA-002_{MILLIS}"
        assert entry.end_photo_url == ""

    @pytest.mark.parametrize("failure", ["broken", "rejected"])
    def test_failed_source_mark_is_reported(self, gateway, spreadsheet, clock, failure):
        if failure == "broken":
            spreadsheet.broken_actions.add("updateCell")
        else:
            spreadsheet.rejected_actions.add("updateCell")
        rows_before = len(spreadsheet.sheets["Crushing_actual"])

        result = asyncio.run(CrushingService(gateway, clock=clock).log_crushing(self._body()))

        assert result.source_marked is False
        assert "still pending" in result.message
        assert len(spreadsheet.sheets["Crushing_actual"]) == rows_before + 1
        jobs = asyncio.run(CrushingService(gateway).jobs())
        assert [e.serial for e in jobs.pending] == ["SA-002"]

    def test_source_not_awaiting_crushing_is_rejected(self, gateway):
        with pytest.raises(BusinessRuleViolationException):
            asyncio.run(CrushingService(gateway).log_crushing(self._body(source_serial="SA-001")))

    def test_source_can_be_addressed_by_row(self, gateway, spreadsheet, clock):
        body = self._body(source_serial="", source_row_index=6)

        result = asyncio.run(CrushingService(gateway, clock=clock).log_crushing(body))

        assert result.entry.input_qty == 50
        assert spreadsheet.posted("updateCell")[-1]["rowIndex"] == "6"

    def test_source_is_required(self):
        with pytest.raises(ValidationError):
            CrushingCreate(date="19/10/26", source_serial=" ")
