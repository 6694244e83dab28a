"""
CSV Exporter Module
===================
Snapshots the crawl collections to CSV:
- raw export: every stored document, one row each
- dedup export: first row per URL, since the store itself never deduplicates

Nested fields (colors, media, size chart, reviews...) are written as JSON
strings. Each written file gets a row in the folder's audit_table.csv.
"""

import os
import json
import pandas as pd
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from config import Config
from utils import (
    logger,
    profile_step,
    build_export_filename,
    calculate_data_schema,
    reorder_dataframe_columns
)


AUDIT_COLUMNS = ['filename', 'source_collection', 'number_of_records', 'data_schema', 'last_updated']


class CsvExporter:
    """Writes raw and deduplicated CSV snapshots of crawl records."""

    def __init__(
        self,
        raw_folder: str = Config.RAW_OUTPUT_FOLDER,
        dedup_folder: str = Config.DEDUP_OUTPUT_FOLDER
    ):
        self.raw_folder = raw_folder
        self.dedup_folder = dedup_folder
        os.makedirs(self.raw_folder, exist_ok=True)
        os.makedirs(self.dedup_folder, exist_ok=True)

    def _flatten(self, document: Dict) -> Dict:
        """Serialize nested values to JSON so each record fits one CSV row."""
        flat = {}
        for key, value in document.items():
            if isinstance(value, (dict, list)):
                flat[key] = json.dumps(value, ensure_ascii=False)
            else:
                flat[key] = value
        return flat

    def _sanitize_for_csv(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Sanitize DataFrame values for CSV writing.
        Removes/replaces characters that can break CSV parsing.
        """
        for col in df.columns:
            if df[col].dtype == 'object':  # String columns
                df[col] = df[col].apply(lambda x: self._sanitize_value(x) if isinstance(x, str) else x)
        return df

    def _sanitize_value(self, value: str) -> str:
        """Sanitize a single string value for CSV."""
        if not value:
            return value
        # Replace newlines and carriage returns with spaces
        value = value.replace('\n', ' ').replace('\r', ' ')
        # Replace tabs with spaces
        value = value.replace('\t', ' ')
        # Remove null bytes
        value = value.replace('\x00', '')
        # Normalize multiple spaces to single space
        while '  ' in value:
            value = value.replace('  ', ' ')
        return value.strip()

    def _write(self, df: pd.DataFrame, folder: str, filename: str, source: str) -> str:
        output_path = os.path.join(folder, filename)
        df.to_csv(
            output_path,
            index=False,
            encoding='utf-8',
            quoting=1  # csv.QUOTE_ALL - nested JSON carries commas
        )
        self._append_to_audit_table(folder, filename, source, df)
        logger.debug(f"Wrote {len(df)} rows to {output_path}")
        return output_path

    def _append_to_audit_table(self, folder: str, filename: str, source: str, df: pd.DataFrame):
        audit_path = os.path.join(folder, 'audit_table.csv')
        row = pd.DataFrame([{
            'filename': filename,
            'source_collection': source,
            'number_of_records': len(df),
            'data_schema': calculate_data_schema(df),
            'last_updated': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        }], columns=AUDIT_COLUMNS)
        row.to_csv(
            audit_path,
            mode='a',
            header=not os.path.exists(audit_path),
            index=False,
            encoding='utf-8'
        )

    def export(self, documents: Iterable[Dict], collection: str, key: str) -> Optional[Dict[str, str]]:
        """
        Export documents to a raw and a deduplicated CSV.

        Returns the two output paths, or None when there was nothing to export.
        """
        rows: List[Dict] = [self._flatten(doc) for doc in documents]
        if not rows:
            logger.info(f"Nothing to export from '{collection}'")
            return None

        with profile_step(f"Export {collection}"):
            df = pd.DataFrame(rows)
            df = reorder_dataframe_columns(df)
            df = self._sanitize_for_csv(df)

            raw_path = self._write(df, self.raw_folder, build_export_filename(collection), collection)

            original_count = len(df)
            if key in df.columns:
                df_dedup = df.drop_duplicates(subset=[key], keep='first')
            else:
                logger.warning(f"Dedup key '{key}' missing from '{collection}', writing rows as-is")
                df_dedup = df
            dedup_path = self._write(
                df_dedup, self.dedup_folder, build_export_filename(collection, prefix='dedup_'), collection
            )

        logger.info(
            f"EXPORT {collection}: {original_count} rows -> {len(df_dedup)} unique by '{key}' | "
            f"{os.path.basename(raw_path)}, {os.path.basename(dedup_path)}"
        )
        return {'raw': raw_path, 'dedup': dedup_path}
