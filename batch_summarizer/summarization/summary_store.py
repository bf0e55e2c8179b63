"""
Summary result store.

Summaries live as flat files in the summaries folder, one <stem>.txt per
source document. The presence of that file is the only record that a
document is done: nothing else is persisted between runs, so a run that
was interrupted simply resumes with whatever is still missing.
"""

import os
from pathlib import Path

from batch_summarizer.documents import summary_filename_for

TEMP_SUFFIX = ".tmp"


class SummaryStore:
    """
    Filesystem-backed store keyed by source filename.

    Example:
        store = SummaryStore(Path("./summaries"))
        if not store.exists("report.pdf"):
            store.write("report.pdf", summary)
    """

    def __init__(self, folder: Path):
        self.folder = Path(folder)

    def ensure_folder(self):
        self.folder.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        """Expected summary path for a source filename."""
        return self.folder / summary_filename_for(filename)

    def exists(self, filename: str) -> bool:
        """True if the document already has a summary (i.e. it is complete)."""
        return self.path_for(filename).exists()

    def write(self, filename: str, summary: str) -> Path:
        """
        Persist a summary and return its path.

        The text goes to a temporary sibling first and is renamed into
        place, so a failed or interrupted write never leaves a partial
        <stem>.txt that later runs would mistake for a finished document.
        """
        path = self.path_for(filename)
        tmp_path = path.with_name(path.name + TEMP_SUFFIX)
        try:
            tmp_path.write_text(summary, encoding='utf-8')
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return path
