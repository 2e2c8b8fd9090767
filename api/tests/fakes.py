"""
In-memory backends used by the tests.
"""

from app.api.workflow_base.backends import Identity, IdentityProvider, ObjectStore, RecordStore
from app.api.workflow_base.exceptions import BackendError


class FakeIdentityProvider(IdentityProvider):
    def __init__(self):
        self.created: list[Identity] = []
        self.deleted: list[str] = []
        self.create_error: BackendError | None = None
        self.delete_error: BackendError | None = None
        self.return_none = False

    async def create_identity(self, email, password):
        if self.create_error:
            raise self.create_error
        if self.return_none:
            return None
        identity = Identity(id=f"user-{len(self.created) + 1}", email=email)
        self.created.append(identity)
        return identity

    async def delete_identity(self, identity_id):
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(identity_id)


class FakeRecordStore(RecordStore):
    def __init__(self):
        self.rows: dict[str, list[dict]] = {}
        self.fail_tables: dict[str, BackendError] = {}
        self.delete_error: BackendError | None = None

    async def insert(self, table, record):
        if table in self.fail_tables:
            raise self.fail_tables[table]
        self.rows.setdefault(table, []).append(record)

    async def delete(self, table, match):
        if self.delete_error:
            raise self.delete_error
        self.rows[table] = [
            row for row in self.rows.get(table, [])
            if any(row.get(column) != value for column, value in match.items())
        ]


class FakeObjectStore(ObjectStore):
    def __init__(self, containers=None):
        self.containers: dict[str, bool] = dict.fromkeys(containers or [], True)
        self.objects: dict[tuple[str, str], dict] = {}
        self.list_calls = 0
        self.list_error: BackendError | None = None
        self.create_error: BackendError | None = None
        self.upload_error: BackendError | None = None
        self.public_reference_error: BackendError | None = None
        self.no_public_reference = False

    async def list_containers(self):
        self.list_calls += 1
        if self.list_error:
            raise self.list_error
        return list(self.containers)

    async def create_container(self, name, public=False):
        if self.create_error:
            raise self.create_error
        self.containers[name] = public

    async def upload(self, container, key, data, content_type, cache_control="3600", overwrite=False):
        if self.upload_error:
            raise self.upload_error
        self.objects[(container, key)] = {
            "data": data,
            "content_type": content_type,
            "cache_control": cache_control,
            "overwrite": overwrite,
        }

    async def get_public_reference(self, container, key):
        if self.public_reference_error:
            raise self.public_reference_error
        if self.no_public_reference:
            return None
        return f"https://storage.test/{container}/{key}"


