import asyncio

from protrack.services.master_data_service import (
    DEFAULT_RAW_MATERIALS,
    DEFAULT_SUPERVISORS,
    OFFLINE_RAW_MATERIALS,
    MasterDataService,
)


def test_supervisors_and_raw_materials_from_master(gateway):
    service = MasterDataService(gateway)

    assert asyncio.run(service.supervisors()) == ["Rahul Kumar", "Amit Singh"]
    assert asyncio.run(service.raw_materials()) == ["Stone-A", "Fuel"]


def test_missing_column_falls_back_to_defaults(gateway, spreadsheet):
    spreadsheet.sheets["Master"] = [["Code", "Plant"], ["A1", "North"]]
    service = MasterDataService(gateway)

    assert asyncio.run(service.supervisors()) == DEFAULT_SUPERVISORS
    assert asyncio.run(service.raw_materials()) == DEFAULT_RAW_MATERIALS


def test_unreachable_master_sheet_uses_short_fallbacks(gateway, spreadsheet):
    spreadsheet.broken_sheets.add("Master")
    service = MasterDataService(gateway)

    assert asyncio.run(service.supervisors()) == DEFAULT_SUPERVISORS
    assert asyncio.run(service.raw_materials()) == OFFLINE_RAW_MATERIALS
    assert len(OFFLINE_RAW_MATERIALS) == 5


def test_empty_master_sheet_yields_empty_lists(gateway, spreadsheet):
    spreadsheet.sheets["Master"] = []
    service = MasterDataService(gateway)

    assert asyncio.run(service.supervisors()) == []


def test_semi_finished_options_are_sorted_and_unique(gateway):
    assert asyncio.run(MasterDataService(gateway).semi_finished_options()) == ["Gravel", "Sand"]


def test_semi_finished_options_empty_when_sheet_unreachable(gateway, spreadsheet):
    spreadsheet.broken_sheets.add("Crusing Items Name")

    assert asyncio.run(MasterDataService(gateway).semi_finished_options()) == []


def test_crushing_items_read_every_other_column(gateway):
    items = asyncio.run(MasterDataService(gateway).crushing_items())

    assert items.headers == ["Crushing Product Name", "FG A", "FG B", "Column 6", "Column 8"]
    assert items.options == [["Gravel", "Sand", "Gravel"], ["10mm", "20mm"], ["Dust"], [], []]


def test_crushing_items_empty_when_sheet_unreachable(gateway, spreadsheet):
    spreadsheet.broken_sheets.add("Crusing Items Name")

    items = asyncio.run(MasterDataService(gateway).crushing_items())

    assert items.headers == []
    assert items.options == [[], [], [], [], []]
