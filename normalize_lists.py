# normalize_lists.py
import logging
import sys

from config import LISTSTYLE_LOG_LEVEL, LISTSTYLE_PROFILE
from service.normalize_service import normalize_html_file


def main():
    if len(sys.argv) < 3:
        print("Usage: python normalize_lists.py input.html output.html [profile_path] [docx_path]")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, LISTSTYLE_LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    input_path = sys.argv[1]
    output_path = sys.argv[2]
    profile_path = sys.argv[3] if len(sys.argv) >= 4 else LISTSTYLE_PROFILE
    docx_path = sys.argv[4] if len(sys.argv) >= 5 else None

    res = normalize_html_file(input_path, output_path, profile_path=profile_path, docx_path=docx_path)

    print(f"✅ Done: {res.output_path}")
    print(f"🧾 Items: {res.items_path}")
    if res.docx_path:
        print(f"📄 Word: {res.docx_path}")


if __name__ == "__main__":
    main()
