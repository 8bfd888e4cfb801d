"""Tests for Excel export."""

from openpyxl import load_workbook

from billpotha import ParsedReceipt, ReceiptParser
from billpotha.export import ExcelExporter
from billpotha.review import ReviewItem


class TestExcelExporter:
    """Test suite for ExcelExporter."""

    def _receipts(self, config, sample_receipt_text):
        parser = ReceiptParser(config)
        return [
            ExcelExporter.create_receipt_dict(parser.parse_receipt(sample_receipt_text), "scans/cargills.txt"),
            ExcelExporter.create_receipt_dict(parser.parse_receipt("Keells\nMilk Rs. 200.00"), "scans/keells.txt"),
        ]

    def test_create_receipt_dict(self, config, sample_receipt_text):
        receipt = ReceiptParser(config).parse_receipt(sample_receipt_text)

        data = ExcelExporter.create_receipt_dict(receipt, "scans/cargills.txt")

        assert data['file_name'] == "cargills.txt"
        assert data['file_path'] == "scans/cargills.txt"
        assert data['store_name'] == "Cargills"
        assert len(data['items']) == 3

    def test_export_sheets(self, tmp_path, config, sample_receipt_text):
        receipts = self._receipts(config, sample_receipt_text)
        review_items = [
            ReviewItem(file_path="scans/keells.txt", reason="missing date", raw_snippet="Keells Milk"),
            ReviewItem(file_path="scans/broken.txt", reason="Processing failed: bad bytes"),
        ]
        output = tmp_path / "out" / "receipts.xlsx"

        ExcelExporter(output).export_receipts(receipts, review_items)

        workbook = load_workbook(output)
        assert workbook.sheetnames == ["Receipts", "Items"]

        ws = workbook["Receipts"]
        assert ws.cell(row=1, column=1).value == "ALL RECEIPTS"
        assert ws.cell(row=3, column=1).value == "File Name"
        # Accepted receipts first, then flagged ones, then failures
        assert ws.cell(row=4, column=1).value == "cargills.txt"
        assert ws.cell(row=4, column=2).value == "Cargills"
        assert ws.cell(row=4, column=7).value == "OK"
        assert ws.cell(row=5, column=1).value == "keells.txt"
        assert ws.cell(row=5, column=7).value == "REVIEW"
        assert ws.cell(row=5, column=8).value == "missing date"
        assert ws.cell(row=6, column=1).value == "broken.txt"
        assert ws.cell(row=6, column=8).value == "Processing failed: bad bytes"

        items = workbook["Items"]
        assert items.cell(row=1, column=3).value == "Item"
        assert items.cell(row=2, column=3).value == "Milk Powder 400g"
        assert items.cell(row=3, column=5).value == 2
        assert items.cell(row=5, column=1).value == "keells.txt"
        assert items.cell(row=5, column=3).value == "Milk"

    def test_failed_file_sharing_a_name_keeps_its_row(self, tmp_path, config, sample_receipt_text):
        receipt = ReceiptParser(config).parse_receipt(sample_receipt_text)
        receipts = [ExcelExporter.create_receipt_dict(receipt, "a/receipt.txt")]
        review_items = [ReviewItem(file_path="b/receipt.txt", reason="Processing failed: bad bytes")]
        output = tmp_path / "receipts.xlsx"

        ExcelExporter(output).export_receipts(receipts, review_items)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=4, column=7).value == "OK"
        assert ws.cell(row=5, column=1).value == "receipt.txt"
        assert ws.cell(row=5, column=8).value == "Processing failed: bad bytes"

    def test_reasons_for_one_file_are_merged(self, tmp_path, config, sample_receipt_text):
        receipt = ReceiptParser(config).parse_receipt(sample_receipt_text)
        receipts = [ExcelExporter.create_receipt_dict(receipt, "scans/cargills.txt")]
        review_items = [
            ReviewItem(file_path="scans/cargills.txt", reason="low confidence (0.35)", raw_snippet="CARGILLS"),
            ReviewItem(file_path="scans/cargills.txt", reason="Potential duplicate receipt"),
        ]
        output = tmp_path / "receipts.xlsx"

        ExcelExporter(output).export_receipts(receipts, review_items)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=4, column=7).value == "REVIEW"
        assert ws.cell(row=4, column=8).value == "low confidence (0.35); Potential duplicate receipt"
        assert ws.cell(row=4, column=9).value == "CARGILLS"
        assert ws.cell(row=5, column=1).value is None

    def test_export_with_summary(self, tmp_path, config, sample_receipt_text):
        receipts = self._receipts(config, sample_receipt_text)
        output = tmp_path / "summary.xlsx"

        ExcelExporter(output).export_receipts(receipts, [], include_summary=True)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=1, column=1).value == "RECEIPT SUMMARY"
        assert ws.cell(row=3, column=2).value == 2
        assert ws.cell(row=3, column=5).value == "Rs. 1,450.50"
        stores = {ws.cell(row=row, column=1).value for row in range(7, 9)}
        assert stores == {"Cargills", "Keells"}

    def test_export_empty_summary(self, tmp_path):
        output = tmp_path / "empty.xlsx"

        ExcelExporter(output).export_receipts([], [], include_summary=True)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=1, column=1).value == "No receipts to summarize"

    def test_validate_receipt_data(self):
        valid = ParsedReceipt(store_name="Keells").to_dict()
        invalid = {'store_name': 'Keells', 'date': None, 'items': [], 'total_amount': "100", 'confidence': 0.5}

        errors = ExcelExporter.validate_receipt_data([valid, invalid])

        assert errors == [
            "Receipt 2: 'date' is None",
            "Receipt 2: 'total_amount' must be numeric",
        ]
