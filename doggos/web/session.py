"""State owned by one Doggos session: the roster, search, and add-dog flow."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
import uuid
from typing import Callable, Optional

from doggos.dog_api import RandomImageTask, fetch_random_image
from doggos.models import DEFAULT_BREED, Dog
from doggos.roster import RosterStore
from doggos.web.config import (
    IMAGE_FETCH_WORKERS,
    MAX_BREED_LENGTH,
    MAX_NAME_LENGTH,
    get_match_policy,
)

logger = logging.getLogger(__name__)


class AddDogFlow:
    """One visit to the "add a dog" screen and its background photo fetch."""

    def __init__(self, task: RandomImageTask) -> None:
        self.flow_id = uuid.uuid4().hex
        self.task = task
        self.error: Optional[str] = None

    @property
    def state(self) -> str:
        return self.task.state

    @property
    def image_url(self) -> Optional[str]:
        return self.task.image_url


def _clean_field(value: str | None, max_length: int) -> str:
    return " ".join((value or "").split())[:max_length]


class DoggosSession:
    """Owns the roster for the lifetime of a running app.

    Handlers share one session; mutations are serialized with a lock.

    Args:
        roster: Roster to manage; a new empty one by default.
        fetch_image: Callable returning a photo URL or raising ``FetchError``.
        executor: Executor for photo fetches; one is created when omitted.
    """

    def __init__(
        self,
        roster: RosterStore | None = None,
        fetch_image: Callable[[], str] = fetch_random_image,
        executor: concurrent.futures.Executor | None = None,
    ) -> None:
        self.roster = roster if roster is not None else RosterStore(
            match_policy=get_match_policy()
        )
        self.search_query = ""
        self._fetch_image = fetch_image
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=IMAGE_FETCH_WORKERS, thread_name_prefix="doggos-image"
        )
        self._add_flow: Optional[AddDogFlow] = None
        self._lock = threading.RLock()

    @property
    def add_flow(self) -> Optional[AddDogFlow]:
        return self._add_flow

    def view(self, query: str | None = None) -> list[Dog]:
        """Return the derived view for ``query``, or the remembered search query."""
        with self._lock:
            return self.roster.derived_view(self.search_query if query is None else query)

    def set_search_query(self, query: str) -> None:
        with self._lock:
            self.search_query = query

    def toggle_liked(self, name: str) -> None:
        with self._lock:
            self.roster.toggle_liked(name)

    def remove(self, name: str) -> None:
        with self._lock:
            self.roster.remove(name)

    def get(self, name: str) -> Optional[Dog]:
        with self._lock:
            return self.roster.get(name)

    def begin_add_flow(self) -> AddDogFlow:
        """Return the active add flow, starting one and its photo fetch if needed."""
        with self._lock:
            if self._add_flow is None:
                task = RandomImageTask(self._executor, fetch=self._fetch_image)
                self._add_flow = AddDogFlow(task)
                task.start()
                logger.info(f"Started add-dog flow {self._add_flow.flow_id}.")
            return self._add_flow

    def cancel_add_flow(self) -> None:
        """Abandon the active add flow; its photo, if it arrives, is dropped."""
        with self._lock:
            flow = self._add_flow
            self._add_flow = None
        if flow is not None:
            flow.task.cancel()
            logger.info(f"Cancelled add-dog flow {flow.flow_id}.")

    def submit_new_dog(
        self,
        name: str | None,
        breed: str | None,
        flow_id: str | None = None,
    ) -> Dog:
        """Add a dog from the add screen, with the flow's photo if it is ready.

        Args:
            name: Dog's name; required.
            breed: Dog's breed; required.
            flow_id: Flow the form was rendered for. A stale id gets no photo.

        Returns:
            The dog that was added.

        Raises:
            ValueError: If name or breed is blank.
            DuplicateNameError: If the name is already listed (ignoring case).
        """
        clean_name = _clean_field(name, MAX_NAME_LENGTH)
        clean_breed = _clean_field(breed, MAX_BREED_LENGTH)
        with self._lock:
            flow = self._add_flow
            if flow is not None and flow_id is not None and flow.flow_id != flow_id:
                flow = None
            if not clean_name or not clean_breed:
                raise ValueError("Dog name and breed are required.")

            dog = Dog(
                name=clean_name,
                breed=clean_breed,
                image_url=flow.image_url if flow is not None else None,
            )
            self.roster.add(dog)

            if flow is not None:
                flow.task.cancel()
                self._add_flow = None
        logger.info(
            f"Added dog '{dog.name}' ({dog.breed}) "
            f"{'with' if dog.image_url else 'without'} photo."
        )
        return dog

    def quick_add(self, name: str | None) -> Dog:
        """Add a dog straight from the search bar: no photo, default breed.

        Raises:
            ValueError: If the name is blank.
            DuplicateNameError: If the name is already listed (ignoring case).
        """
        clean_name = _clean_field(name, MAX_NAME_LENGTH)
        if not clean_name:
            raise ValueError("Dog name is required.")
        dog = Dog(name=clean_name, breed=DEFAULT_BREED)
        with self._lock:
            self.roster.add(dog)
        logger.info(f"Quick-added dog '{dog.name}'.")
        return dog

    def close(self) -> None:
        """Cancel any pending fetch and release the executor if owned."""
        self.cancel_add_flow()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
