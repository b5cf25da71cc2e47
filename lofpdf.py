#!/usr/bin/env python3
"""
lofpdf: Builds a paginated PDF whose front matter carries self-referential
lists (table of contents, list of figures, tables and examples).

Each list is measured with a dry run, its pages are reserved before the body
is laid out, and it is inked into that reservation once every page number is
known.
"""

import argparse
import logging
import os
import sys
import time

from rich.console import Console
from rich.table import Table
from rich.theme import Theme as RichTheme

from core.log_utils import ContextFilter, setup_logging
from lofpdf_lib.converter import Converter
from lofpdf_lib.errors import LofPdfError
from lofpdf_lib.loader import load_document
from lofpdf_lib.readback import verify_listing
from lofpdf_lib.theme import Theme

log = logging.getLogger("lofpdf.main")


# --- CUSTOM ARGPARSE FORMATTER ---
class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Orchestrates loading, conversion and verification from command-line arguments."""

    DEFAULT_FILENAME_SENTINEL = "__DEFAULT_FILENAME__"

    def __init__(self, args):
        self.args = args
        self.console = Console(
            theme=RichTheme({"table.header": "bold sky_blue2", "warn": "bold yellow"})
        )

    def run(self):
        """Main entry point for the application logic. Returns an exit status."""
        start = time.monotonic()
        setup_logging(
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        log_filter = ContextFilter(os.path.basename(self.args.document))
        logging.getLogger().addFilter(log_filter)
        try:
            theme = self._load_theme()
            if self.args.write_theme:
                theme.save(self.args.write_theme)

            document = load_document(self.args.document)
            if self.args.toc:
                document.attributes["toc"] = True

            converter = Converter(theme)
            output_path = None if self.args.dry_run else self._resolve_output_filename()
            result = converter.convert(
                document, output_path=output_path, reserve_only=self.args.dry_run
            )
            self._display_summary(converter, result)

            if self.args.verify and output_path:
                if not self._verify(converter, result):
                    return 1
        finally:
            logging.getLogger().removeFilter(log_filter)
        log.info("Finished in %.2fs", time.monotonic() - start)
        return 0

    def _load_theme(self):
        theme = Theme.load(self.args.theme)
        if self.args.drift_policy:
            theme = theme.derive({"layout": {"drift_policy": self.args.drift_policy}})
        return theme

    def _resolve_output_filename(self):
        """Defaults the output PDF name to the input document name."""
        if self.args.output_file and self.args.output_file != self.DEFAULT_FILENAME_SENTINEL:
            return self.args.output_file
        base = os.path.splitext(os.path.basename(self.args.document))[0]
        return f"{base}.pdf"

    def _display_summary(self, converter, result):
        """Prints a table of the list sections and the pages they occupy."""
        table = Table(title="List Sections")
        table.add_column("Section")
        table.add_column("Reserved")
        table.add_column("Break after")
        table.add_column("Rendered")
        for section in converter.registry:
            if section.kind in result.omitted:
                table.add_row(section.kind.value, "-", "-", "[warn]omitted (no entries)[/warn]")
                continue
            reservation = section.reservation
            rendered = result.page_ranges.get(section.kind)
            table.add_row(
                section.kind.value,
                str(reservation.extent.page_range),
                "yes" if reservation.break_after else "no",
                str(rendered) if rendered else "(dry run)",
            )
        self.console.print(table)
        self.console.print(
            f"Pages: {result.page_count} ({result.front_matter_pages} front matter)"
            + (f" -> {result.output_path}" if result.output_path else "")
        )

    def _verify(self, converter, result):
        """Reads the written PDF back and checks each list landed on its pages."""
        ok = True
        for section in converter.registry:
            page_range = result.page_ranges.get(section.kind)
            if page_range is None:
                continue
            missing = verify_listing(result.output_path, section, page_range)
            if missing:
                ok = False
                self.console.print(
                    f"[warn]{section.kind.value}: {len(missing)} entries missing[/warn]"
                )
        if ok:
            self.console.print("Verification passed.")
        return ok

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            '  python lofpdf.py manual.json -o "manual.pdf"',
            "  python lofpdf.py manual.json --toc -T theme.ini --verify",
            "  python lofpdf.py manual.json -D -d reserve,render --color-logs",
        ]
        parser = argparse.ArgumentParser(
            description="Builds a PDF with reserved front-matter lists.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )
        S = Application.DEFAULT_FILENAME_SENTINEL

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument("document", help="Path to the input JSON document.")
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )

        g_layout = parser.add_argument_group("Layout Control")
        g_layout.add_argument(
            "-T",
            "--theme",
            metavar="FILE",
            default=None,
            help="INI theme file overriding the built-in defaults.",
        )
        g_layout.add_argument(
            "--toc",
            action="store_true",
            help="Add a table of contents ahead of the other lists. (default: %(default)s)",
        )
        g_layout.add_argument(
            "--drift-policy",
            choices=["error", "warn"],
            default=None,
            help="What to do if a list outgrows its reservation. (default: theme)",
        )

        g_out = parser.add_argument_group("Script Output & Actions")
        g_out.add_argument(
            "-o",
            "--output-file",
            nargs="?",
            const=S,
            default=S,
            metavar="FILE",
            help="Output PDF. Defaults to the document name.",
        )
        g_out.add_argument(
            "-D",
            "--dry-run",
            action="store_true",
            help="Only reserve list sections and report. (default: %(default)s)",
        )
        g_out.add_argument(
            "--verify",
            action="store_true",
            help="Read the PDF back and check list placement. (default: %(default)s)",
        )
        g_out.add_argument(
            "--write-theme",
            metavar="FILE",
            default=None,
            help="Write the effective theme to an INI file.",
        )
        g_out.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Redirect all logging output to a specified file.",
        )
        g_out.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output. (default: %(default)s)",
        )
        g_out.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress. (default: %(default)s)",
        )
        g_out.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging (all,collect,reserve,render,registry,layout,theme).",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        sys.exit(Application(args).run())
    except FileNotFoundError as e:
        log.critical(str(e))
        sys.exit(1)
    except LofPdfError as e:
        log.critical("Document build aborted: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        log.critical("\nAn unexpected error occurred: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
