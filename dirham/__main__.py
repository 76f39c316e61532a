import argparse
import sys

from dirham.common.logging_config import setup_logging
from dirham.common.settings import ParserSettings, get_data_dir
from dirham.core.consolidator import records_to_frame
from dirham.core.importer import StatementImporter
from dirham.core.store import JsonFileTransactionStore
from dirham.parsing.exceptions import FatalStatementError
from dirham.parsing.pipeline import StatementPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='dirham', description='Import bank statement PDFs into a transaction store')
    parser.add_argument('--data-dir', default=None, help='Store directory (default: $DIRHAM_DATA_DIR or ./data)')
    parser.add_argument('--log-level', default=None, help='Log level (default: $DIRHAM_LOG_LEVEL or INFO)')
    parser.add_argument('--log-file', default=None, help='Also write JSON logs to this file')

    sub = parser.add_subparsers(dest='command', required=True)

    p_import = sub.add_parser('import', help='Import one or more statement PDFs')
    p_import.add_argument('pdfs', nargs='+', help='Input PDF files')

    sub.add_parser('list', help='Print stored transactions')
    sub.add_parser('clear', help='Delete all stored transactions and statements')
    return parser


def cmd_import(importer: StatementImporter, pdfs) -> int:
    failures = 0
    for path in pdfs:
        try:
            summary = importer.import_file(path)
        except (FatalStatementError, OSError) as e:
            failures += 1
            code = getattr(e, 'code', type(e).__name__)
            print(f"{path}: FAILED [{code}] {getattr(e, 'message', e)}", file=sys.stderr)
            continue
        result = summary.parse_result
        print(
            f"{path}: {result.bank_name} {result.period.label()} - "
            f"{summary.message} ({summary.duplicates} duplicates, {summary.total} total)"
        )
    return 1 if failures else 0


def cmd_list(importer: StatementImporter) -> int:
    df = records_to_frame(importer.store.list())
    if df.empty:
        print("No transactions stored.")
        return 0
    print(df.drop(columns=['statement_id']).to_string(index=False))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)

    store = JsonFileTransactionStore(args.data_dir or get_data_dir())
    importer = StatementImporter(store, pipeline=StatementPipeline(settings=ParserSettings.from_env()))

    if args.command == 'import':
        return cmd_import(importer, args.pdfs)
    if args.command == 'list':
        return cmd_list(importer)
    importer.clear()
    print("All transactions and statements cleared.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
