import json
import logging
from pathlib import Path

from .exceptions import DocumentFormatError
from .models import PageDocument

logger = logging.getLogger(__name__)


def save_document(path: str | Path, document: PageDocument) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Saved page %r to %s", document.title, path)


def load_document(path: str | Path) -> PageDocument:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DocumentFormatError(f"{path} is not valid JSON: {exc}") from exc
    return PageDocument.from_dict(data)
