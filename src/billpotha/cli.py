"""Command-line interface for parsing receipt OCR text."""

import logging
import click
from pathlib import Path
from typing import List, Dict, Any, Optional
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm
import sys
import threading

from .config import load_config
from .engine import ReceiptParser
from .exceptions import ConfigurationError
from .export import ExcelExporter
from .review import ReviewQueue, DEFAULT_CONFIDENCE_THRESHOLD, make_snippet

# Logs go to stderr; stdout carries the JSON printed by `parse`
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger(__name__)


class BatchProcessor:
    """Parse a folder of OCR text files with a shared parser."""

    def __init__(self,
                 rules_path: Optional[Path] = None,
                 max_workers: int = 4,
                 min_confidence: float = DEFAULT_CONFIDENCE_THRESHOLD):
        """
        Initialize the batch processor.

        Args:
            rules_path: Custom parsing rules file; packaged rules when None
            max_workers: Number of parallel workers
            min_confidence: Parses below this confidence go to review
        """
        self.max_workers = max_workers
        self.parser = ReceiptParser(load_config(rules_path))
        self.review_queue = ReviewQueue(confidence_threshold=min_confidence)
        # Guards stats and review queue; the parser itself needs no locking
        self._lock = threading.Lock()

        self.stats = {
            'total_files': 0,
            'processed': 0,
            'failed': 0,
            'review_items': 0
        }

    def find_text_files(self, input_dir: Path) -> List[Path]:
        """Find all OCR text files in the input directory and its subdirectories."""
        text_files = sorted(set(input_dir.glob('**/*.txt')))
        logger.info(f"Found {len(text_files)} OCR text files in {input_dir}")
        return text_files

    def process_single_file(self, text_path: Path) -> Dict[str, Any]:
        """
        Parse a single OCR text file.

        Args:
            text_path: Path to the text file

        Returns:
            Receipt dictionary with review status
        """
        try:
            text = text_path.read_text(encoding='utf-8')
            receipt = self.parser.parse_receipt(text)

            result = ExcelExporter.create_receipt_dict(receipt, str(text_path))
            with self._lock:
                result['needs_review'] = self.review_queue.add_from_parse(str(text_path), receipt, text)
                self.stats['processed'] += 1
            return result

        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to process {text_path}: {e}")
            with self._lock:
                self.stats['failed'] += 1
                self.review_queue.add_item(
                    file_path=str(text_path),
                    reason=f"Processing failed: {e}",
                    raw_snippet=make_snippet(f"Error: {e}")
                )
            return {
                'file_path': str(text_path),
                'file_name': text_path.name,
                'needs_review': True,
                'error': str(e)
            }

    def process_batch(self, input_dir: Path) -> List[Dict[str, Any]]:
        """
        Parse all text files in the input directory.

        Args:
            input_dir: Directory containing OCR text files

        Returns:
            Results ordered by file path
        """
        text_files = self.find_text_files(input_dir)
        self.stats['total_files'] = len(text_files)

        if not text_files:
            logger.warning("No OCR text files found!")
            return []

        results = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {
                executor.submit(self.process_single_file, text_file): text_file
                for text_file in text_files
            }

            with tqdm(total=len(text_files), desc="Parsing receipts") as pbar:
                for future in as_completed(future_to_file):
                    results.append(future.result())
                    pbar.update(1)
                    pbar.set_postfix({
                        'processed': self.stats['processed'],
                        'failed': self.stats['failed']
                    })

        parsed = [r for r in results if 'error' not in r]
        for conflict in self.review_queue.detect_conflicts(parsed):
            self.review_queue.items.append(conflict)

        flagged = {item.file_path for item in self.review_queue.items}
        for result in results:
            result['needs_review'] = result['file_path'] in flagged

        self.stats['review_items'] = len(self.review_queue.items)

        logger.info(f"Batch processing complete. Processed: {self.stats['processed']}, "
                    f"Failed: {self.stats['failed']}, Review items: {self.stats['review_items']}")

        return sorted(results, key=lambda r: r['file_path'])


@click.group()
def cli():
    """Bill Potha - extract store, date, items and total from receipt OCR text."""
    pass


@cli.command()
@click.argument('text_file', type=click.File('r', encoding='utf-8'))
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to a custom parsing rules file')
@click.option('--indent', default=2, type=int, help='JSON indentation')
def parse(text_file, rules: Optional[Path], indent: int):
    """
    Parse one OCR text file (or - for stdin) and print the result as JSON.

    Example:
        billpotha parse receipt.txt
    """
    try:
        parser = ReceiptParser(load_config(rules))
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    receipt = parser.parse_receipt(text_file.read())
    click.echo(json.dumps(receipt.to_dict(), ensure_ascii=False, indent=indent))


@cli.command()
@click.option('--in', 'input_dir', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Input directory containing OCR text files')
@click.option('--out', 'output_dir', required=True, type=click.Path(path_type=Path),
              help='Output directory for results')
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to a custom parsing rules file')
@click.option('--max-workers', default=4, type=int,
              help='Maximum number of parallel workers')
@click.option('--min-confidence', default=DEFAULT_CONFIDENCE_THRESHOLD, type=click.FloatRange(0.0, 1.0),
              help='Receipts below this confidence are sent to review')
@click.option('--summary', is_flag=True, help='Include summary section in Excel output')
@click.option('--debug', is_flag=True, help='Enable debug output')
def run(input_dir: Path,
        output_dir: Path,
        rules: Optional[Path],
        max_workers: int,
        min_confidence: float,
        summary: bool,
        debug: bool):
    """
    Parse a folder of OCR text files and write JSON and Excel output.

    Example:
        billpotha run --in ./ocr_text --out ./out --summary
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)

        if debug:
            logging.getLogger().setLevel(logging.DEBUG)
            click.echo("Debug mode enabled - detailed parsing logs will be shown")

        logger.info(f"Input directory: {input_dir}")
        logger.info(f"Output directory: {output_dir}")

        processor = BatchProcessor(
            rules_path=rules,
            max_workers=max_workers,
            min_confidence=min_confidence
        )

        results = processor.process_batch(input_dir)
        if not results:
            logger.error("No files were processed!")
            return

        json_path = output_dir / 'receipts.json'
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, ensure_ascii=False, indent=2)

        receipts = [r for r in results if 'error' not in r]
        excel_path = output_dir / 'receipts.xlsx'
        exporter = ExcelExporter(excel_path)
        exporter.export_receipts(
            receipts=receipts,
            review_items=processor.review_queue.items,
            include_summary=summary
        )

        click.echo("\n" + "=" * 50)
        click.echo("PROCESSING SUMMARY")
        click.echo("=" * 50)
        click.echo(f"Total files found: {processor.stats['total_files']}")
        click.echo(f"Successfully parsed: {processor.stats['processed']}")
        click.echo(f"Failed: {processor.stats['failed']}")
        click.echo(f"Items needing review: {len(processor.review_queue.items)}")
        click.echo("\nOutput files:")
        click.echo(f"  - JSON: {json_path}")
        click.echo(f"  - Excel: {excel_path}")

        review_summary = processor.review_queue.get_summary()
        for reason, count in sorted(review_summary.get('reason_breakdown', {}).items()):
            click.echo(f"  {reason}: {count}")

    except ConfigurationError as e:
        logger.error(f"Invalid parsing rules: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    cli()
