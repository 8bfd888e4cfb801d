"""Excel export for parsed receipts and review data."""

import logging
from typing import List, Dict, Any
from pathlib import Path
from dataclasses import replace
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from .models import ParsedReceipt
from .review import ReviewItem

logger = logging.getLogger(__name__)

RECEIPT_HEADERS = ["File Name", "Store", "Date", "Total (Rs.)", "Items", "Confidence",
                   "Review Status", "Review Reason", "Raw Snippet"]
RECEIPT_WIDTHS = [25, 20, 12, 14, 8, 12, 14, 40, 60]

ITEM_HEADERS = ["File Name", "Line", "Item", "Unit Price (Rs.)", "Quantity"]
ITEM_WIDTHS = [25, 8, 40, 16, 10]


class ExcelExporter:
    """Export parsed receipts, their line items and review data to Excel."""

    def __init__(self, output_path: Path):
        """
        Initialize Excel exporter.

        Args:
            output_path: Path for the output Excel file
        """
        self.output_path = output_path
        self.workbook = Workbook()

    def export_receipts(self,
                        receipts: List[Dict[str, Any]],
                        review_items: List[ReviewItem],
                        include_summary: bool = False):
        """
        Export receipts and review data.

        Args:
            receipts: Receipt dicts built with create_receipt_dict
            review_items: Receipts needing review
            include_summary: Whether to add a summary block above the receipts
        """
        try:
            if "Sheet" in self.workbook.sheetnames:
                self.workbook.remove(self.workbook["Sheet"])

            self._create_receipts_sheet(receipts, review_items, include_summary)
            self._create_items_sheet(receipts)

            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.workbook.save(str(self.output_path))

            logger.info(f"Excel file exported to: {self.output_path}")

        except Exception as e:
            logger.error(f"Failed to export Excel file: {e}")
            raise

    def _create_receipts_sheet(self, receipts: List[Dict[str, Any]],
                               review_items: List[ReviewItem], include_summary: bool):
        """One row per receipt: accepted receipts first, then those needing review."""
        ws = self.workbook.create_sheet("Receipts")
        current_row = 1

        if include_summary:
            current_row = self._add_summary_section(ws, receipts, current_row)
            current_row += 2

        review_lookup = self._merge_review_items(review_items)

        ws.cell(row=current_row, column=1, value="ALL RECEIPTS").font = Font(bold=True, size=14)
        current_row += 2
        current_row = self._write_headers(ws, RECEIPT_HEADERS, current_row)

        ok_receipts = [r for r in receipts if r.get('file_path', '') not in review_lookup]
        flagged = [r for r in receipts if r.get('file_path', '') in review_lookup]

        for receipt in ok_receipts:
            self._write_receipt_row(ws, current_row, receipt)
            ws.cell(row=current_row, column=7, value="OK")
            current_row += 1

        for receipt in flagged:
            review_item = review_lookup[receipt['file_path']]
            self._write_receipt_row(ws, current_row, receipt)
            ws.cell(row=current_row, column=7, value="REVIEW")
            ws.cell(row=current_row, column=8, value=review_item.reason)
            ws.cell(row=current_row, column=9, value=review_item.raw_snippet)
            current_row += 1

        # Review items whose file failed before producing a receipt
        receipt_paths = {r.get('file_path', '') for r in receipts}
        for file_path, item in review_lookup.items():
            if file_path in receipt_paths:
                continue
            ws.cell(row=current_row, column=1, value=Path(file_path).name)
            ws.cell(row=current_row, column=2, value=item.suggested_store or '')
            ws.cell(row=current_row, column=3, value=item.suggested_date or '')
            ws.cell(row=current_row, column=4, value=item.suggested_amount or '')
            ws.cell(row=current_row, column=7, value="REVIEW")
            ws.cell(row=current_row, column=8, value=item.reason)
            ws.cell(row=current_row, column=9, value=item.raw_snippet)
            current_row += 1

        self._set_widths(ws, RECEIPT_WIDTHS)
        logger.info(f"Created receipts sheet with {len(receipts)} receipts and {len(review_items)} review items")

    @staticmethod
    def _merge_review_items(review_items: List[ReviewItem]) -> Dict[str, ReviewItem]:
        """One review entry per file path, joining the reasons of repeated entries."""
        merged: Dict[str, ReviewItem] = {}
        for item in review_items:
            existing = merged.get(item.file_path)
            if existing is None:
                merged[item.file_path] = item
            elif item.reason not in existing.reason.split('; '):
                merged[item.file_path] = replace(existing, reason=f"{existing.reason}; {item.reason}")
        return merged

    def _create_items_sheet(self, receipts: List[Dict[str, Any]]):
        """One row per line item across all receipts."""
        ws = self.workbook.create_sheet("Items")
        current_row = self._write_headers(ws, ITEM_HEADERS, 1)

        for receipt in receipts:
            for item in receipt.get('items', []):
                ws.cell(row=current_row, column=1, value=receipt.get('file_name', ''))
                ws.cell(row=current_row, column=2, value=item['line_index'])
                ws.cell(row=current_row, column=3, value=item['name'])
                ws.cell(row=current_row, column=4, value=item['unit_price'])
                ws.cell(row=current_row, column=5, value=item['quantity'])
                current_row += 1

        self._set_widths(ws, ITEM_WIDTHS)

    def _write_receipt_row(self, ws, row: int, receipt: Dict[str, Any]):
        ws.cell(row=row, column=1, value=receipt.get('file_name', ''))
        ws.cell(row=row, column=2, value=receipt.get('store_name', ''))
        ws.cell(row=row, column=3, value=receipt.get('date', ''))
        ws.cell(row=row, column=4, value=receipt.get('total_amount', 0))
        ws.cell(row=row, column=5, value=len(receipt.get('items', [])))
        ws.cell(row=row, column=6, value=receipt.get('confidence', 0))

    def _write_headers(self, ws, headers: List[str], row: int) -> int:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = Font(bold=True)
            cell.fill = PatternFill(start_color="E6E6E6", end_color="E6E6E6", fill_type="solid")
            cell.alignment = Alignment(horizontal="center")
        return row + 1

    def _set_widths(self, ws, widths: List[int]):
        for i, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

    def _add_summary_section(self, ws, receipts: List[Dict[str, Any]], start_row: int) -> int:
        """Add summary statistics to the top of the receipts sheet."""
        if not receipts:
            ws.cell(row=start_row, column=1, value="No receipts to summarize")
            return start_row + 1

        df = pd.DataFrame(receipts)

        ws.cell(row=start_row, column=1, value="RECEIPT SUMMARY").font = Font(bold=True, size=14)
        current_row = start_row + 2

        ws.cell(row=current_row, column=1, value="Total Receipts:").font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=len(receipts))

        total_spent = float(df['total_amount'].sum())
        ws.cell(row=current_row, column=4, value="Total Spent:").font = Font(bold=True)
        ws.cell(row=current_row, column=5, value=f"Rs. {total_spent:,.2f}")

        avg_amount = float(df['total_amount'].mean())
        ws.cell(row=current_row, column=7, value="Average:").font = Font(bold=True)
        ws.cell(row=current_row, column=8, value=f"Rs. {avg_amount:,.2f}")
        current_row += 2

        ws.cell(row=current_row, column=1, value="Store Breakdown:").font = Font(bold=True)
        current_row += 1
        ws.cell(row=current_row, column=1, value="Store").font = Font(bold=True)
        ws.cell(row=current_row, column=2, value="Count").font = Font(bold=True)
        ws.cell(row=current_row, column=3, value="Amount").font = Font(bold=True)
        current_row += 1

        stores = df['store_name'].replace('', 'Unknown')
        store_summary = df.groupby(stores)['total_amount'].agg(['count', 'sum'])
        for store, data in store_summary.nlargest(5, 'sum').iterrows():
            ws.cell(row=current_row, column=1, value=store)
            ws.cell(row=current_row, column=2, value=int(data['count']))
            ws.cell(row=current_row, column=3, value=f"Rs. {float(data['sum']):,.2f}")
            current_row += 1

        return current_row

    @staticmethod
    def validate_receipt_data(receipts: List[Dict[str, Any]]) -> List[str]:
        """
        Validate receipt data before export.

        Args:
            receipts: List of receipt dictionaries

        Returns:
            List of validation error messages
        """
        errors = []
        required_fields = ['store_name', 'date', 'total_amount', 'items', 'confidence']

        for i, receipt in enumerate(receipts):
            for field_name in required_fields:
                if field_name not in receipt:
                    errors.append(f"Receipt {i+1}: Missing '{field_name}' field")
                elif receipt[field_name] is None:
                    errors.append(f"Receipt {i+1}: '{field_name}' is None")
                elif field_name in ('total_amount', 'confidence') and not isinstance(receipt[field_name], (int, float)):
                    errors.append(f"Receipt {i+1}: '{field_name}' must be numeric")

        return errors

    @staticmethod
    def create_receipt_dict(receipt: ParsedReceipt, file_path: str = "") -> Dict[str, Any]:
        """
        Flatten a parsed receipt into an export row.

        Args:
            receipt: Parse result
            file_path: Source file path (for metadata)

        Returns:
            Receipt dictionary
        """
        data = receipt.to_dict()
        data['file_name'] = Path(file_path).name if file_path else ''
        data['file_path'] = file_path
        return data
