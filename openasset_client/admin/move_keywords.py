"""Move file keywords into a file field for every file in an album."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from openasset_client.admin.batching import BatchPlan, MigrationProgress, plan_batches
from openasset_client.api.rest_client import RestClient
from openasset_client.api.rest_options import QueryOptions
from openasset_client.models import (
    Album,
    ApiError,
    ArgumentError,
    ClassifiedError,
    Field,
    FileAsset,
    Keyword,
    KeywordCategory,
    PreconditionError,
)
from openasset_client.utils.prompt import ConfirmationGate, is_restricted_display_type
from openasset_client.utils.response import ClassifiedResponse, Outcome
from openasset_client.utils.validator import (
    NounResolver,
    normalize_batch_size,
    validate_insert_mode,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 200

FILE_FIELD_TYPE = "image"


@dataclass
class KeywordSet:
    """Keywords of the selected categories, in the order the API returned them."""
    keywords: List[Keyword]
    keyword_ids: List[int]

    def names_for(self, keyword_ids: Iterable[int]) -> List[str]:
        wanted = set(keyword_ids)
        return [keyword.name for keyword in self.keywords if keyword.id in wanted]


@dataclass
class BatchOutcome:
    """What happened to one batch."""
    plan: BatchPlan
    files_changed: int = 0
    response: Optional[ClassifiedResponse] = None
    error: Optional[ClassifiedError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def status(self) -> str:
        if self.error is not None:
            return f"failed ({self.error.status_code})"
        if self.response is None:
            return "skipped" if self.files_changed == 0 else "dry run"
        return "updated"


@dataclass
class MigrationReport:
    """Summary of one move_keywords_to_field run."""
    album: Album
    target_field: Field
    keyword_count: int
    progress: MigrationProgress
    batches: List[BatchOutcome] = field(default_factory=list)

    @property
    def files_updated(self) -> int:
        return self.progress.files_updated

    def rows(self) -> List[List[Any]]:
        return [
            [
                outcome.plan.progress,
                len(outcome.plan.file_ids),
                outcome.files_changed,
                outcome.status,
            ]
            for outcome in self.batches
        ]


class KeywordSetFetcher:
    """Loads every keyword of one or more keyword categories."""

    def __init__(self, client: RestClient, log: Optional[logging.Logger] = None):
        self.client = client
        self.log = log or logger

    def fetch(self, categories: List[KeywordCategory]) -> KeywordSet:
        """Return all keywords in ``categories``.

        Raises:
            ApiError: If the keyword listing fails
            PreconditionError: If the listing succeeds but holds no keywords
        """
        first = categories[0]
        self.log.info("Retrieving keywords for keyword category => %r.", first.name)

        options = QueryOptions()
        options.add_option("limit", "0")
        options.add_option(
            "keyword_category_id", ",".join(str(category.id) for category in categories)
        )

        keywords = self.client.get_keywords(options)
        if not keywords:
            message = (
                f"No keywords found in keyword category => {first.name!r} with id {first.id!r}"
            )
            self.log.error(message)
            raise PreconditionError(message)

        return KeywordSet(keywords=keywords, keyword_ids=[keyword.id for keyword in keywords])


def merge_field_value(existing: str, value: str, separator: str, insert_mode: str) -> str:
    """Combine a field's current value with a new one.

    ``overwrite`` discards ``existing``; ``append`` joins both with the
    separator, without checking whether ``value`` is already present.
    """
    if insert_mode == "overwrite" or not existing:
        return value
    return f"{existing}{separator}{value}"


class FieldMutator:
    """Writes keyword names into the target field for one batch of files."""

    def __init__(
        self,
        client: RestClient,
        keyword_set: KeywordSet,
        target_field: Field,
        separator: str,
        insert_mode: str,
        log: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.keyword_set = keyword_set
        self.target_field = target_field
        self.separator = separator
        self.insert_mode = insert_mode
        self.log = log or logger

    def build_update(self, file: FileAsset) -> Optional[FileAsset]:
        """Return the update for one file, or None when it has no matching keywords."""
        names = self.keyword_set.names_for(file.keyword_ids)
        if not names:
            return None

        value = merge_field_value(
            file.field_value(self.target_field.id),
            self.separator.join(names),
            self.separator,
            self.insert_mode,
        )
        return FileAsset(id=file.id, filename=file.filename, fields={self.target_field.id: [value]})

    def fetch_files(self, plan: BatchPlan) -> List[FileAsset]:
        options = QueryOptions()
        options.add_option("id", ",".join(str(file_id) for file_id in plan.file_ids))
        options.add_option("limit", "0")
        options.add_option("keywords", "all")
        options.add_option("fields", "all")
        return self.client.get_files(options)

    def mutate(self, plan: BatchPlan) -> BatchOutcome:
        try:
            files = self.fetch_files(plan)
        except ApiError as e:
            if e.error is None:
                raise
            e.error.id = ",".join(str(file_id) for file_id in plan.file_ids)
            e.error.resource_name = self.target_field.name
            self.log.error(
                "Batch %s failed: %s (HTTP %s)", plan.progress, e.error.message, e.error.status_code
            )
            return BatchOutcome(plan=plan, response=e.response, error=e.error)

        if len(files) != len(plan.file_ids):
            self.log.warning(
                "Batch %s: expected %d files, API returned %d.",
                plan.progress,
                len(plan.file_ids),
                len(files),
            )

        updates = [update for update in map(self.build_update, files) if update is not None]
        if not updates:
            self.log.info(
                "Batch %s: no file has keywords from the selected categories.", plan.progress
            )
            return BatchOutcome(plan=plan)

        response = self.client.update_files(updates)
        outcome = BatchOutcome(plan=plan, files_changed=len(updates), response=response)

        if response is not None and response.is_error:
            outcome.error = response.to_error(
                resource_id=",".join(str(update.id) for update in updates),
                resource_name=self.target_field.name,
                resource_type="Files",
            )
            self.log.error(
                "Batch %s failed: %s (HTTP %s)",
                plan.progress,
                outcome.error.message,
                outcome.error.status_code,
            )

        return outcome


class KeywordFieldMigrator:
    """Moves keywords into a field for every file of an album.

    Files are processed in batches, strictly one after the other. A failed
    batch is logged and the run continues with the next one.
    """

    def __init__(
        self,
        client: RestClient,
        log: Optional[logging.Logger] = None,
        gate: Optional[ConfirmationGate] = None,
        halt_on_auth_failure: bool = True,
    ):
        self.client = client
        self.log = log or logger
        self.gate = gate or ConfirmationGate()
        self.halt_on_auth_failure = halt_on_auth_failure

        self.albums = NounResolver(
            Album, client.fetch_by_id(client.get_albums, files="all"), "Albums"
        )
        self.keyword_categories = NounResolver(
            KeywordCategory, client.fetch_by_id(client.get_keyword_categories), "KeywordCategories"
        )
        self.fields = NounResolver(Field, client.fetch_by_id(client.get_fields), "Fields")

    def resolve_target_field(self, reference: Any) -> Field:
        target_field = self.fields.resolve(reference)
        if target_field.field_type and target_field.field_type != FILE_FIELD_TYPE:
            message = (
                f"Field {target_field.name!r} with id {target_field.id!r} is a "
                f"{target_field.field_type!r} field. Expected a file field."
            )
            self.log.error(message)
            raise PreconditionError(message)
        return target_field

    def move_keywords_to_field(
        self,
        album: Any,
        keyword_categories: Any,
        target_field: Any,
        separator: str,
        insert_mode: str,
        batch_size: Any = DEFAULT_BATCH_SIZE,
    ) -> MigrationReport:
        """Copy each file's keyword names into ``target_field``.

        Args:
            album: Album record, id, numeric string or dict with an id
            keyword_categories: One keyword category reference or a list of them
            target_field: Field record, id, numeric string or dict with an id
            separator: Joins keyword names, and the new value onto the old one
            insert_mode: "append" or "overwrite"
            batch_size: Files per update request

        Returns:
            MigrationReport with the running totals

        Raises:
            ArgumentError: On malformed arguments, before any request is sent
            PreconditionError: When the album or the keyword set is empty
            UserAbort: When the operator declines the restricted field prompt
            ApiError: When a lookup fails, or a batch is rejected with a 401;
                in the latter case ``report`` holds the batches already sent
        """
        insert_mode = validate_insert_mode(insert_mode)
        batch_size = normalize_batch_size(batch_size)
        if not isinstance(separator, str):
            message = f"Argument Error: Expected a string separator. Instead got {separator!r}"
            self.log.error(message)
            raise ArgumentError(message)

        album_found = self.albums.resolve(album)
        categories_found = self.keyword_categories.resolve_many(keyword_categories)
        field_found = self.resolve_target_field(target_field)

        if is_restricted_display_type(field_found.field_display_type):
            self.gate.confirm()

        keyword_set = KeywordSetFetcher(self.client, self.log).fetch(categories_found)

        self.log.info("Retrieving file ids in album %r.", album_found.name)
        file_ids = list(album_found.file_ids)
        if not file_ids:
            message = f"No files found in album {album_found.name!r} with id {album_found.id!r}."
            self.log.error(message)
            raise PreconditionError(message)

        self.log.info("Calculating batch size.")
        plans = plan_batches(file_ids, batch_size)

        mutator = FieldMutator(
            self.client, keyword_set, field_found, separator, insert_mode, self.log
        )
        report = MigrationReport(
            album=album_found,
            target_field=field_found,
            keyword_count=len(keyword_set.keywords),
            progress=MigrationProgress(),
        )

        for plan in plans:
            outcome = mutator.mutate(plan)
            report.batches.append(outcome)
            report.progress = report.progress.advance(plan, failed=outcome.failed)
            print(
                f"Batch progress: {plan.progress} "
                f"({report.progress.files_updated}/{plan.total_count} files)"
            )
            self._check_auth(outcome, report)

        self.log.info("Done.")
        return report

    def _check_auth(self, outcome: BatchOutcome, report: MigrationReport) -> None:
        response = outcome.response
        if self.halt_on_auth_failure and response is not None and (
            response.outcome == Outcome.AUTH_FAILURE
        ):
            raise ApiError(
                f"Batch {outcome.plan.progress} was rejected: "
                f"{response.reason}: Invalid Credentials.",
                response=response,
                error=outcome.error,
                report=report,
            )


def move_keywords_to_field(
    client: RestClient,
    album: Any,
    keyword_categories: Any,
    target_field: Any,
    separator: str,
    insert_mode: str,
    batch_size: Any = DEFAULT_BATCH_SIZE,
    **kwargs: Any,
) -> MigrationReport:
    """Run a KeywordFieldMigrator once; extra keyword arguments go to its constructor."""
    return KeywordFieldMigrator(client, **kwargs).move_keywords_to_field(
        album, keyword_categories, target_field, separator, insert_mode, batch_size
    )
