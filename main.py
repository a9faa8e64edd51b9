"""
Entry point for the WordPress WXR to flat-file CMS converter.
"""

import glob
import os

from wxr_converter.converter import WXRConverter, load_config
from wxr_converter.extractors.wxr_document import WXRParseError
from wxr_converter.sinks import JsonLinesSink
from wxr_converter.utils.redirects import generate_redirects_csv

CONFIG_FILE = "config/converter_config.json"
REPORT_DIR = "reports/conversion"


def main():
    """
    Main function to run the converter on every export found in ``docs/``.
    """
    config = load_config(CONFIG_FILE)
    config.setdefault("report_dir", REPORT_DIR)
    report_dir = config["report_dir"] or REPORT_DIR

    # Dynamically find export files in the 'docs' directory
    docs_path = "docs/"
    xml_files = glob.glob(os.path.join(docs_path, "*.xml"))

    if not xml_files:
        print(f"[ERROR] No WordPress export files (.xml) found in '{docs_path}' directory.")
        return

    for xml_path in xml_files:
        converter = WXRConverter(config)
        converter.log_message(f"Discovered WXR export: {xml_path}", level="DEBUG")
        try:
            summary = converter.convert(xml_path)
        except (WXRParseError, OSError) as e:
            converter.log_message(f"Cannot convert {xml_path}: {e}", level="ERROR")
            continue

        stem = os.path.splitext(os.path.basename(xml_path))[0]
        converter.export(JsonLinesSink(os.path.join(report_dir, f"{stem}.entities.jsonl")))

        try:
            posts = list(converter.get_pages().values()) + list(converter.get_files().values())
            out_path = generate_redirects_csv(posts, out_path=os.path.join(report_dir, f"{stem}.redirect_map.csv"))
            converter.log_message(f"Redirect CSV generated with {len(posts)} entries: {out_path}")
        except OSError as e:
            converter.log_message(f"Failed to generate redirects: {e}", level="ERROR")

        if summary.diagnostics:
            converter.log_message(f"{len(summary.diagnostics)} diagnostics written to {report_dir}", level="WARNING")

    print("[INFO] Conversion process finished.")


if __name__ == "__main__":
    main()
