# =============================================================================
# utils/csv_utils.py - Input list and report file utilities
# =============================================================================

import csv
import zipfile
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple
import logging

import pandas as pd

from core.exceptions import ConfigurationError, InputMissingError, OutputWriteError

EXCEL_SUFFIXES = {'.xlsx', '.xls'}


class CSVHandler:
    """Utilities for reading group lists and writing reports"""

    @staticmethod
    def read_csv(file_path: str, encoding: str = 'utf-8-sig',
                 delimiter: str = ',') -> Tuple[List[Dict[str, Any]], List[str]]:
        """Read CSV file and return list of dictionaries plus headers"""
        logger = logging.getLogger(__name__)

        try:
            with open(file_path, 'r', newline='', encoding=encoding) as file:
                dict_reader = csv.DictReader(file, delimiter=delimiter)
                headers = list(dict_reader.fieldnames or [])
                data = list(dict_reader)

            logger.info(f"CSV Headers: {headers[:10]}")
            logger.info(f"Successfully read {len(data)} records from {file_path}")
            return data, headers

        except FileNotFoundError as e:
            logger.error(f"Input file {file_path} not found")
            raise InputMissingError(f"Input file not found: {file_path}") from e
        except (UnicodeDecodeError, csv.Error) as e:
            logger.error(f"Error reading CSV: {e}")
            raise ConfigurationError(
                f"Could not read {file_path} as {encoding} CSV: {e}. Save the group list as UTF-8 CSV or Excel."
            ) from e

    @staticmethod
    def read_excel(file_path: str, sheet_name: Optional[str] = None) -> Tuple[List[Dict[str, Any]], List[str]]:
        """Read an Excel sheet (first sheet by default) into records plus headers"""
        logger = logging.getLogger(__name__)

        try:
            frame = pd.read_excel(file_path, sheet_name=sheet_name if sheet_name else 0, dtype=str)
        except FileNotFoundError as e:
            logger.error(f"Input file {file_path} not found")
            raise InputMissingError(f"Input file not found: {file_path}") from e
        except (ValueError, zipfile.BadZipFile) as e:
            logger.error(f"Error reading Excel: {e}")
            raise ConfigurationError(f"Could not read {file_path} as an Excel workbook: {e}") from e

        headers = [str(column) for column in frame.columns]
        data = frame.to_dict(orient='records')
        logger.info(f"Successfully read {len(data)} records from {file_path}")
        return data, headers

    @classmethod
    def read_group_names(cls, file_path: str, column: str,
                         sheet_name: Optional[str] = None) -> List[str]:
        """Read the group display names from one column, dropping blank values"""
        logger = logging.getLogger(__name__)

        if not Path(file_path).exists():
            logger.error(f"Input file {file_path} not found")
            raise InputMissingError(f"Input file not found: {file_path}")

        if Path(file_path).suffix.lower() in EXCEL_SUFFIXES:
            data, headers = cls.read_excel(file_path, sheet_name)
        else:
            data, headers = cls.read_csv(file_path)

        if column not in headers:
            raise ConfigurationError(
                f"Column '{column}' not found in {file_path}. Available columns: {headers}"
            )

        names = []
        for row in data:
            value = row.get(column)
            if value is None or pd.isna(value):
                continue
            value = str(value).strip()
            if value:
                names.append(value)

        logger.info(f"Read {len(names)} group names from column '{column}'")
        return names

    @staticmethod
    def write_csv(data: List[Dict[str, Any]], output_path: str,
                  fieldnames: Optional[List[str]] = None) -> None:
        """Write data to CSV file, always including the header row"""
        logger = logging.getLogger(__name__)

        if fieldnames is None:
            if not data:
                raise OutputWriteError(f"Cannot infer CSV header for empty report {output_path}")
            fieldnames = list(data[0].keys())

        if not data:
            logger.warning(f"No data rows to write, {output_path} will contain only the header")

        try:
            with open(output_path, 'w', newline='', encoding='utf-8') as file:
                writer = csv.DictWriter(file, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(data)

            logger.info(f"Successfully wrote {len(data)} records to {output_path}")

        except OSError as e:
            logger.error(f"Error writing CSV: {e}")
            raise OutputWriteError(f"Could not write {output_path}: {e}") from e

    @staticmethod
    def write_excel(data: List[Dict[str, Any]], output_path: str,
                    fieldnames: List[str], sheet_name: str = 'Report') -> None:
        """Write data to a single-sheet Excel workbook"""
        logger = logging.getLogger(__name__)

        try:
            frame = pd.DataFrame(data, columns=fieldnames)
            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                frame.to_excel(writer, sheet_name=sheet_name, index=False)

            logger.info(f"Successfully wrote {len(data)} records to {output_path}")

        except OSError as e:
            logger.error(f"Error writing Excel: {e}")
            raise OutputWriteError(f"Could not write {output_path}: {e}") from e

    @classmethod
    def write_report(cls, data: List[Dict[str, Any]], output_path: str,
                     fieldnames: List[str]) -> None:
        """Write a report as Excel when the path ends in .xlsx, otherwise CSV"""
        if Path(output_path).suffix.lower() == '.xlsx':
            cls.write_excel(data, output_path, fieldnames)
        else:
            cls.write_csv(data, output_path, fieldnames)
