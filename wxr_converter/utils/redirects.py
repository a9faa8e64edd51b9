"""
Generation of redirect mapping CSV files.

The :func:`generate_redirects_csv` helper writes a CSV file containing the
mapping of WordPress URLs to their paths in the new content tree.  The
resulting file is used to configure 301 redirects so that existing links
continue to work after migration.
"""

from __future__ import annotations

import csv
import os
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from wxr_converter.entities import Post


def generate_redirects_csv(
    posts: Iterable[Post], *, new_base: str = "", out_path: str = "reports/redirect_map.csv"
) -> str:
    """Generate a CSV mapping old WordPress links to new paths.

    Parameters
    ----------
    posts:
        Pages, posts and attachments.  Entries without a ``link`` are
        skipped.
    new_base:
        Optional base URL of the new site prepended to each path.
    out_path:
        Location of the CSV file to be written.  The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["OldURL", "NewURL", "Type", "ID"])
        for post in posts:
            if not post.link:
                continue
            path = post.filepath or "/"
            new_url = f"{new_base.rstrip('/')}{path}" if new_base else path
            writer.writerow([post.link, new_url, post.type, post.id])
    return out_path
