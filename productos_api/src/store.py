"""JSON file store for the productos collection.

The whole collection lives in one file holding a JSON array. Every mutation
reads the full array, changes it in memory and rewrites the full file through
a temporary file that is then moved over the original, so readers never see a
half-written collection.

All file access runs under one lock per store. A read-modify-write cycle is a
single critical section, which rules out lost updates between concurrent
requests handled by the same process.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from errors import (
    CorruptStoreError,
    DuplicateIdError,
    NotFoundError,
    StorageBusyError,
    StorageIOError,
    ValidationError,
)

logger = logging.getLogger(__name__)

Product = Dict[str, Any]

_SCALAR_IDS = (str, int, float)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class ProductStore:
    """Whole-file-replace store for an ordered list of product records."""

    def __init__(
        self,
        path: Path,
        lock_timeout: float = 5.0,
        strict_ids: bool = False,
        id_field: str = "id",
    ) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self.strict_ids = strict_ids
        self.id_field = id_field
        self._lock = threading.Lock()

    # --- public operations ------------------------------------------------

    def ensure_file(self) -> None:
        """Create the backing file as an empty array if it does not exist."""
        with self._locked():
            if self.path.exists():
                return
            self._write([])
            logger.info("Product store created: %s", self.path)

    def load_all(self) -> List[Product]:
        with self._locked():
            return self._read()

    def replace_all(self, products: Sequence[Product]) -> None:
        """Overwrite the collection with ``products`` verbatim."""
        with self._locked():
            self._write(list(products))

    def append(self, product: Product) -> Product:
        """Add ``product`` as the last element of the collection and return it."""
        with self._locked():
            products = self._read()
            if self.strict_ids:
                self._check_new_id(products, product)
            products.append(product)
            self._write(products)
        logger.info("Appended product %r (%d total)", product.get(self.id_field), len(products))
        return product

    def update_by_id(self, product_id: str, patch: Product) -> Product:
        """Merge ``patch`` into the first record matching ``product_id``."""
        with self._locked():
            products = self._read()
            index = self._find(products, product_id)
            if index is None:
                raise NotFoundError(f"Product {product_id} not found")
            if self.strict_ids and self.id_field in patch:
                self._check_id_change(products, index, patch[self.id_field])
            updated = dict(products[index])
            updated.update(patch)
            products[index] = updated
            self._write(products)
        logger.info("Updated product %s", product_id)
        return updated

    def delete_by_id(self, product_id: str) -> bool:
        """Remove the first record matching ``product_id``.

        Returns False, without touching the file, when nothing matched.
        """
        with self._locked():
            products = self._read()
            index = self._find(products, product_id)
            if index is None:
                return False
            del products[index]
            self._write(products)
        logger.info("Deleted product %s", product_id)
        return True

    # --- helpers ----------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            logger.warning("Timed out after %.2fs waiting for %s", self.lock_timeout, self.path)
            raise StorageBusyError("Product store is busy, try again")
        try:
            yield
        finally:
            self._lock.release()

    def _read(self) -> List[Product]:
        """Read and parse the backing file. Caller must hold the lock."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.error("Cannot read product store %s: %s", self.path, exc)
            raise StorageIOError("Product store could not be read") from exc
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.error("Product store %s is not valid JSON: %s", self.path, exc)
            raise CorruptStoreError("Invalid product store format") from exc
        if not isinstance(data, list):
            logger.error("Product store %s holds %s, expected an array", self.path, type(data).__name__)
            raise CorruptStoreError("Invalid product store format")
        return data

    def _write(self, products: List[Product]) -> None:
        """Atomically replace the backing file. Caller must hold the lock."""
        try:
            payload = json.dumps(products, indent=2, ensure_ascii=False, allow_nan=False)
        except ValueError as exc:
            raise ValidationError("Products must not contain NaN or Infinity") from exc
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error("Cannot write product store %s: %s", self.path, exc)
            raise StorageIOError("Product store could not be written") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        logger.debug("Wrote %d products to %s", len(products), self.path)

    def _matches(self, product: Any, product_id: str) -> bool:
        if not isinstance(product, dict):
            return False
        value = product.get(self.id_field)
        if isinstance(value, bool) or not isinstance(value, _SCALAR_IDS):
            return False
        return str(value) == str(product_id)

    def _find(self, products: List[Product], product_id: str) -> Optional[int]:
        for index, product in enumerate(products):
            if self._matches(product, product_id):
                return index
        return None

    def _check_new_id(self, products: List[Product], product: Product) -> None:
        value = product.get(self.id_field)
        if isinstance(value, bool) or not isinstance(value, _SCALAR_IDS):
            raise ValidationError(f"Product must include a '{self.id_field}' string or number")
        if self._find(products, str(value)) is not None:
            raise DuplicateIdError(f"Product {value} already exists")

    def _check_id_change(self, products: List[Product], index: int, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, _SCALAR_IDS):
            raise ValidationError(f"'{self.id_field}' must be a string or number")
        other = self._find(products, str(value))
        if other is not None and other != index:
            raise DuplicateIdError(f"Product {value} already exists")
