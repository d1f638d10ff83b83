# ACA Reconciliation Engine
# Classifies a local batch against the remote snapshot and applies the result

from collections.abc import Iterable, Sequence

from aca.models import (
    DRY_RUN_ID,
    ArtifactRecord,
    ArtifactType,
    CompanionFile,
    DeleteResult,
    RemoteArtifact,
    SyncFailure,
    SyncResult,
    SyncResultItem,
    normalize_content,
)
from aca.store.base import ArtifactStore, BlobStore, StoreError, companion_blob_key


def content_differs(local: str, remote: str) -> bool:
    """Compare artifact content, ignoring outer whitespace and line endings."""
    return normalize_content(local) != normalize_content(remote)


class ReconciliationEngine:
    """
    Push-only reconciliation of local artifacts against a remote store.

    Every call recomputes the classification from the current remote
    snapshot; nothing is remembered between calls.

    Classification per local record:
        created    no remote artifact with the same name:type key
        updated    content differs, or a skill's companion paths drifted
        unchanged  everything else
    Remote artifacts no local record maps to are deletion candidates and
    are only removed through delete_configs().
    """

    def __init__(self, store: ArtifactStore, blobs: BlobStore):
        """
        Initialize reconciliation engine.

        Args:
            store: Artifact metadata store.
            blobs: Blob store for skill companion files.
        """
        self.store = store
        self.blobs = blobs

    def reconcile(
        self,
        batch: Sequence[ArtifactRecord],
        owner_id: str,
        types: Iterable[ArtifactType] | None = None,
        *,
        dry_run: bool = False,
    ) -> SyncResult:
        """
        Reconcile a local batch with the artifacts owned by owner_id.

        Args:
            batch: Local records, typically from one or more scans.
            owner_id: Owner whose remote artifacts are compared.
            types: Optional type filter applied to both sides.
            dry_run: Classify only, issue no writes.

        Returns:
            SyncResult with the classification. Per-item store failures
            in apply mode are listed in failed instead.

        Raises:
            StoreError: If the remote snapshot cannot be listed.
        """
        wanted = list(types) if types is not None else None
        local = [r for r in batch if wanted is None or r.type in wanted]
        remote = self.store.list_owned(owner_id, wanted)

        # First remote artifact per key is the match target
        remote_map: dict[str, RemoteArtifact] = {}
        for artifact in remote:
            remote_map.setdefault(artifact.key, artifact)

        matched_ids: set[str] = set()
        # Companion paths written (or planned) during this call, by key
        planned_paths: dict[str, frozenset[str]] = {}
        result = SyncResult()

        for record in local:
            match = remote_map.get(record.key)
            try:
                if match is None:
                    created = self._create(record, owner_id, dry_run)
                    result.created.append(SyncResultItem(record.name, record.type, created.id))
                    remote_map[record.key] = created
                    matched_ids.add(created.id)
                    planned_paths[record.key] = _paths(record.companion_files)
                    continue

                matched_ids.add(match.id)

                if content_differs(record.content, match.content):
                    self._update(record, match, dry_run)
                    result.updated.append(SyncResultItem(record.name, record.type, match.id))
                    match.content = record.content
                    if record.companion_files is not None:
                        planned_paths[record.key] = _paths(record.companion_files)
                elif record.type == ArtifactType.SKILL and record.companion_files is not None:
                    if self._companions_changed(match, record.companion_files, planned_paths.get(record.key)):
                        if not dry_run:
                            self._sync_companions(match.id, record.companion_files)
                        result.updated.append(SyncResultItem(record.name, record.type, match.id))
                        planned_paths[record.key] = _paths(record.companion_files)
                    else:
                        result.unchanged.append(SyncResultItem(record.name, record.type, match.id))
                else:
                    result.unchanged.append(SyncResultItem(record.name, record.type, match.id))
            except StoreError as e:
                result.failed.append(SyncFailure(record.name, record.type, str(e)))

        for artifact in remote:
            if artifact.id not in matched_ids:
                result.deletion_candidates.append(SyncResultItem(artifact.name, artifact.type, artifact.id))

        return result

    def delete_configs(self, ids: Iterable[str], owner_id: str | None = None) -> DeleteResult:
        """
        Delete artifacts by id, best-effort per id.

        Skills lose their companion blobs and metadata before the artifact
        row itself. Unknown ids, ids owned by someone other than owner_id,
        and store failures are reported in failed without stopping the batch.

        Args:
            ids: Artifact ids to delete.
            owner_id: If given, only artifacts owned by this owner are deleted.

        Returns:
            DeleteResult with deleted and failed ids.
        """
        result = DeleteResult()

        for artifact_id in ids:
            try:
                artifact = self.store.get(artifact_id)
                if artifact is None or (owner_id is not None and artifact.owner_id != owner_id):
                    result.failed.append(artifact_id)
                    continue

                if artifact.type == ArtifactType.SKILL:
                    self._delete_companions(artifact_id)

                if self.store.delete(artifact_id):
                    result.deleted.append(artifact_id)
                else:
                    result.failed.append(artifact_id)
            except StoreError:
                result.failed.append(artifact_id)

        return result

    def _create(self, record: ArtifactRecord, owner_id: str, dry_run: bool) -> RemoteArtifact:
        if dry_run:
            return RemoteArtifact(
                id=DRY_RUN_ID,
                name=record.name,
                type=record.type,
                content=record.content,
                owner_id=owner_id,
            )

        created = self.store.create(owner_id, record.name, record.type, record.content)
        if record.type == ArtifactType.SKILL and record.companion_files:
            self._sync_companions(created.id, record.companion_files)
        return created

    def _update(self, record: ArtifactRecord, match: RemoteArtifact, dry_run: bool) -> None:
        if dry_run:
            return

        if self.store.update(match.id, record.content) is None:
            raise StoreError(f"Artifact {match.id} disappeared during update")
        if record.type == ArtifactType.SKILL and record.companion_files is not None:
            self._sync_companions(match.id, record.companion_files)

    def _companions_changed(
        self,
        match: RemoteArtifact,
        files: Sequence[CompanionFile],
        planned: frozenset[str] | None,
    ) -> bool:
        """Shallow comparison: file count and path membership only."""
        if planned is not None:
            remote_paths = planned
        else:
            remote_paths = frozenset(c.path for c in self.store.list_companions(match.id))

        if len(remote_paths) != len(files):
            return True
        return any(f.path not in remote_paths for f in files)

    def _sync_companions(self, artifact_id: str, files: Sequence[CompanionFile]) -> None:
        """Drop remote paths absent locally, then upload every local companion."""
        local_paths = {companion.path for companion in files}

        # Stale blobs go first so a path can turn from file into directory
        for stale in self.store.list_companions(artifact_id):
            if stale.path not in local_paths:
                self.blobs.delete_blob(stale.blob_key)
                self.store.remove_companion(stale.id)

        for companion in files:
            key = companion_blob_key(artifact_id, companion.path)
            data = companion.to_bytes()
            self.blobs.put_blob(key, data, companion.mime_type)
            self.store.put_companion(artifact_id, companion.path, key, len(data), companion.mime_type)

    def _delete_companions(self, artifact_id: str) -> None:
        for companion in self.store.list_companions(artifact_id):
            self.blobs.delete_blob(companion.blob_key)
            self.store.remove_companion(companion.id)


def _paths(files: Sequence[CompanionFile] | None) -> frozenset[str]:
    return frozenset(f.path for f in files or ())
