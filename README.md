# pgcatalog

Query helpers for a data-management catalog kept in PostgreSQL: datasets made
of packages and folders, the files behind them, organizations, users, teams and
storage accounting.

The package depends only on the standard library. It works on any DB-API 2.0
connection whose driver uses the `%s` (`format`) parameter style, as the common
PostgreSQL drivers do. Each query opens its own cursor and closes it afterwards.

## Installation

```
pip install pgcatalog
```

## Modules

- `pgcatalog.base`: `QueryBase`, which holds the connection as `db`, and
  `NoRowsError`, raised when a lookup finds no row.
- `pgcatalog.packages`: `PackageParams`, `Package` and `PackageQueries`:
  - `add_folder(params)` adds a folder, or returns the folder that already has
    that name in the same place. It raises `ValueError` if the type is not
    `"Collection"`.
  - `add_packages(records)` adds packages that are not folders. Records are
    grouped by `parent_id`, where `-1` means the dataset root. A package whose
    name is taken is retried as `name (1).ext`, then `name (2).ext`, and so on.
  - `get_package_children(parent, dataset_id, only_folders)` leaves out packages
    in the `DELETING` state. Pass `None` as `parent` to list the root.
  - `get_package_by_node_id(node_id)`.
  - `get_package_ancestor_ids(package_id)` returns the package id first, then the
    ids of its enclosing folders up to the root.
  - `expand_name(original_name, index)` inserts ` (index)` before the first dot,
    so `expand_name("file.gz.tar", 1)` returns `"file (1).gz.tar"`.
- `pgcatalog.files`: `FileParams`, `File` and `FileQueries`:
  - `add_files(files)` inserts files. A file whose uuid already exists at the
    same bucket and key is touched and returned. One whose uuid exists at a
    different location is left alone and is not returned. An empty list raises
    `ValueError`.
  - `update_bucket_for_file(upload_id, bucket, s3_key, organization_id)` raises
    `FileRecordNotFoundError` when no row matches and `MultipleRowsAffectedError`
    when more than one row does.
- `pgcatalog.package_storage` and `pgcatalog.organization_storage`:
  - `increment_package_storage` and `increment_organization_storage` add a size,
    which may be negative.
  - `increment_package_storage_ancestors` adds the size to a package and to every
    package above it.
  - `get_package_storage_by_id` and `get_organization_storage_by_id` read the
    stored size.
- `pgcatalog.organizations`: `Organization` and `OrganizationQueries`, which look
  up an organization by id, node id, name or slug.
- `pgcatalog.users`: `User` and `UserQueries` (`get_by_cognito_id`,
  `get_user_by_id`). `preferred_org` is `-1` when the user has none.
- `pgcatalog.tokens`: `Token` and `TokenQueries` (`get_token_by_cognito_id`,
  `get_user_by_cognito_id`).
- `pgcatalog.organization_user`: `OrganizationUser`, `FeatureFlag`,
  `OrganizationClaim` and `OrganizationUserQueries`:
  - `get_organization_user` and `add_organization_user`. Adding an existing
    member returns the existing membership unchanged.
  - `get_organization_claim` and `get_organization_claim_by_node_id` return the
    user's role together with the organization's enabled feature flags.
  - These raise `OrganizationUserNotFoundError` when the user is not a member.
- `pgcatalog.team_user`: `UserTeamMembership`, `TeamClaim` and `TeamUserQueries`
  (`get_team_memberships`, `get_team_claims`). A team with no system type gets
  `"<none>"` as its claim's `team_type`.
- `pgcatalog.upload`: `FileDTO` and
  `package_type_resolver(items, extension_types)`. It gives each item that has
  no file type one from `extension_types`, keyed by everything after the first
  dot. Unknown extensions get `"GenericData"`. A `"Persyst"` file is paired with
  a `.dat` file of the same name in the same folder: both get the Persyst file's
  upload id as `merge_package_id`. The items are updated in place.
- `pgcatalog.store`: `Queries` combines all the query classes. `SQLStore` adds
  `exec_tx(fn)`, which calls `fn` with a `Queries` on the same connection. It
  commits and returns `fn`'s result on success. If `fn` raises, it rolls back and
  re-raises. If the rollback fails as well, it raises a `RuntimeError` that names
  both errors.

## Usage

```python
from pgcatalog.store import SQLStore
from pgcatalog.packages import PackageParams

store = SQLStore(connection)  # any DB-API connection using the %s paramstyle

def create(queries):
    folder = queries.add_folder(PackageParams(
        name="Folder1", package_type="Collection", package_state="READY",
        node_id="N:package:folder-1", parent_id=-1, dataset_id=1, owner_id=1,
    ))
    return queries.add_packages([PackageParams(
        name="notes.txt", package_type="Text", package_state="READY",
        node_id="N:package:notes-1", parent_id=folder.id, dataset_id=1, owner_id=1,
    )])

packages = store.exec_tx(create)
```

## What it does not do

- It does not create or migrate the database schema. It expects the catalog
  tables to exist already, both the `pennsieve` schema and the per-organization
  schemas.
- It ships no PostgreSQL driver. You supply the connection.
- It ships no table of file extensions. `package_type_resolver` uses the mapping
  you pass to it.
- It has no command-line interface.

## Development

```
pip install -e ".[test]"
pytest
```