import csv

import pandas as pd
import pytest

from core.exceptions import ConfigurationError, InputMissingError, OutputWriteError
from utils.csv_utils import CSVHandler


def write_rows(path, header, rows):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)


def test_read_group_names_drops_blank_values(tmp_path):
    path = tmp_path / "groups.csv"
    write_rows(path, ["GroupName", "Owner"], [["G1", "x"], ["", "y"], ["  ", "z"], [" G2 ", "w"]])

    assert CSVHandler.read_group_names(str(path), "GroupName") == ["G1", "G2"]


def test_read_group_names_handles_utf8_bom(tmp_path):
    path = tmp_path / "groups.csv"
    path.write_text("GroupName\nG1\n", encoding="utf-8-sig")

    assert CSVHandler.read_group_names(str(path), "GroupName") == ["G1"]


def test_read_group_names_missing_file_raises_input_missing(tmp_path):
    with pytest.raises(InputMissingError):
        CSVHandler.read_group_names(str(tmp_path / "nope.csv"), "GroupName")


def test_read_group_names_missing_column_lists_available(tmp_path):
    path = tmp_path / "groups.csv"
    write_rows(path, ["Name"], [["G1"]])

    with pytest.raises(ConfigurationError, match="Available columns"):
        CSVHandler.read_group_names(str(path), "GroupName")


def test_read_group_names_from_excel(tmp_path):
    path = tmp_path / "groups.xlsx"
    pd.DataFrame({"GroupName": ["G1", None, "G2"], "Other": [1, 2, 3]}).to_excel(path, index=False)

    assert CSVHandler.read_group_names(str(path), "GroupName") == ["G1", "G2"]


def test_write_csv_writes_header_and_rows(tmp_path):
    path = tmp_path / "out.csv"

    CSVHandler.write_csv([{"A": "1", "B": ""}], str(path), ["A", "B"])

    assert path.read_text(encoding="utf-8").splitlines() == ["A,B", "1,"]


def test_write_csv_writes_header_for_empty_report(tmp_path):
    path = tmp_path / "out.csv"

    CSVHandler.write_csv([], str(path), ["AllImportedMembers", "InCompareGroups"])

    assert path.read_text(encoding="utf-8").splitlines() == ["AllImportedMembers,InCompareGroups"]


def test_write_csv_overwrites_existing_file(tmp_path):
    path = tmp_path / "out.csv"
    path.write_text("stale\ncontent\n", encoding="utf-8")

    CSVHandler.write_csv([{"A": "new"}], str(path), ["A"])

    assert path.read_text(encoding="utf-8").splitlines() == ["A", "new"]


def test_write_csv_unwritable_destination_raises_output_write_error(tmp_path):
    path = tmp_path / "missing-dir" / "out.csv"

    with pytest.raises(OutputWriteError):
        CSVHandler.write_csv([{"A": "1"}], str(path), ["A"])


def test_write_report_uses_excel_for_xlsx(tmp_path):
    path = tmp_path / "out.xlsx"

    CSVHandler.write_report([{"A": "1", "B": "2"}], str(path), ["A", "B"])

    frame = pd.read_excel(path, dtype=str)
    assert list(frame.columns) == ["A", "B"]
    assert frame.iloc[0].tolist() == ["1", "2"]


def test_read_group_names_non_utf8_csv_raises_configuration_error(tmp_path):
    path = tmp_path / "groups.csv"
    path.write_bytes(b"GroupName\n\xff\xfe\xfa\n")

    with pytest.raises(ConfigurationError, match="UTF-8"):
        CSVHandler.read_group_names(str(path), "GroupName")


def test_read_group_names_corrupt_workbook_raises_configuration_error(tmp_path):
    path = tmp_path / "groups.xlsx"
    path.write_bytes(b"this is not a zip archive")

    with pytest.raises(ConfigurationError, match="Excel workbook"):
        CSVHandler.read_group_names(str(path), "GroupName")


def test_read_group_names_unknown_sheet_raises_configuration_error(tmp_path):
    path = tmp_path / "groups.xlsx"
    pd.DataFrame({"GroupName": ["G1"]}).to_excel(path, index=False, sheet_name="Groups")

    with pytest.raises(ConfigurationError):
        CSVHandler.read_group_names(str(path), "GroupName", sheet_name="Missing")
