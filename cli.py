import logging
import os
import sys

from src.bom_summary import (
    BomSummaryError,
    build_part_rows,
    encode_share_token,
    is_token_too_long,
    load_config,
    load_folder,
    process_excel_files,
    sort_parts,
    summarize,
)
from src.bom_summary.constants import SHARE_TOKEN_WARN_LENGTH
from src.exporters import generate_summary_csv, generate_summary_html, summary_filename


def main(argv: list[str]) -> int:
    folder = argv[1] if len(argv) > 1 else "data"
    config_path = argv[2] if len(argv) > 2 else None

    if not os.path.isdir(folder):
        print(f"❌ Missing folder: '{folder}'. Create it and drop your BOM workbooks there.")
        return 1

    try:
        config = load_config(config_path)
    except BomSummaryError as e:
        print(f"❌ Config error: {e}")
        return 1

    files = load_folder(folder)
    print(f"📂 Reading {len(files)} files from '{folder}'...")

    # 1. Aggregate
    try:
        data = process_excel_files(files, on_progress=lambda msg: print(f"   {msg}"), config=config)
    except BomSummaryError as e:
        print(f"❌ {e}")
        return 1

    print(f"\n✅ {summarize(data)}")

    # 2. Order for export (Tier 1 first, biggest totals first)
    rows = sort_parts(build_part_rows(data), file_ids=data.file_ids)

    # 3. Output
    out_dir = "output"
    os.makedirs(out_dir, exist_ok=True)

    csv_path = os.path.join(out_dir, summary_filename())
    html_path = os.path.join(out_dir, "bom_summary.html")

    try:
        with open(csv_path, "wb") as f:
            f.write(generate_summary_csv(rows, data.file_ids))
        print(f"✅ CSV:  {csv_path}")
    except PermissionError:
        print(f"❌ Error: Close {csv_path} first.")

    with open(html_path, "w", encoding="utf-8") as f:
        f.write(generate_summary_html(rows, data.file_ids))
    print(f"✅ HTML: {html_path}")

    # 4. Share token
    token = encode_share_token(data)
    print(f"\n🔗 Share token: {len(token)} characters")
    if is_token_too_long(token):
        print(f"⚠️  Longer than {SHARE_TOKEN_WARN_LENGTH} characters; the link may not survive every browser or chat client.")

    print("\nDone.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main(sys.argv))
