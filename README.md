# amocrm_sdk

A compact client for the amoCRM REST API (v4). It covers lead sources,
tags, tasks, unsorted requests and users. It uses only the Python
standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Talking to the API

Every function takes a *requester* as its first argument. A requester has
a `base_url` attribute and a `do_request(request)` method. The method takes
an `amocrm_sdk.transport.Request` and returns an
`amocrm_sdk.transport.Response`.

`amocrm_sdk.transport.HttpRequester` is the ready-made requester. It sends
each request over HTTP with an `Authorization: Bearer <api_key>` header and
a 30-second timeout by default. A trailing slash on the base URL is dropped.

```python
from amocrm_sdk.transport import HttpRequester

requester = HttpRequester("https://example.amocrm.ru", "placeholder")
```

Any object that follows the `amocrm_sdk.transport.Requester` protocol can
be used instead. For example, a fake in tests:

```python
from amocrm_sdk.transport import Response

class FakeRequester:
    base_url = "https://example.amocrm.ru"

    def __init__(self, status_code, body):
        self.reply = Response(status_code, body)
        self.last_request = None

    def do_request(self, request):
        self.last_request = request
        return self.reply
```

`amocrm_sdk.transport.send(requester, method, path, *, params=None,
json_body=None, expected=(200,))` is the helper that every entity function
is built on:

- Query parameters are encoded in key order.
- A JSON body is sent compact, with a `Content-Type: application/json` header.

### Errors

- If a response has a status code outside the ones a call accepts, the call
  raises `amocrm_sdk.transport.UnexpectedStatusError`. The status code is
  kept in its `status_code` attribute.
- A body that is not valid JSON raises `amocrm_sdk.transport.ApiError`.
- A network failure in `HttpRequester` also raises `ApiError`.
- `UnexpectedStatusError` is a subclass of `ApiError`.
- Updating a source, tag or task whose `id` is unset raises `ValueError`
  before any request is sent.

## Sources

```python
from amocrm_sdk import sources

items = sources.get_sources(
    requester, 1, 50, sources.with_filter({"filter[type]": "calls"})
)
created = sources.create_source(requester, sources.Source(name="Website", type="other"))
sources.update_source(requester, sources.Source(id=created.id, name="Website form"))
sources.set_source_default(requester, created.id)
sources.link_source_to_pipeline(requester, created.id, 2001)
sources.unlink_source_from_pipeline(requester, created.id, 2001)
print(sources.get_source_services(requester))
sources.delete_source(requester, created.id)
```

`Source`, `Pipeline`, `Service` and `External` are dataclasses with
`to_dict()` and `from_dict()`. `Source.to_dict()` always includes `name`
and leaves out every other empty field.

## Tags

`EntityType` names the kind of entity a tag belongs to: `CONTACT`, `LEAD`,
`COMPANY` or `CUSTOMER`.

```python
from amocrm_sdk import tags

tag = tags.create_tag(requester, tags.EntityType.CONTACT, tags.Tag(name="VIP", color="#FF0000"))
tags.create_tags(requester, tags.EntityType.LEAD, [tags.Tag(name="Hot"), tags.Tag(name="Cold")])
tags.link_entity_with_tags(requester, tags.EntityType.CONTACT, 456, [tag])
print(tags.get_entity_tags(requester, tags.EntityType.CONTACT, 456))
print(tags.get_tags(requester, tags.EntityType.CONTACT, 1, 50))
tags.delete_tag(requester, tags.EntityType.CONTACT, tag.id)
```

## Tasks

```python
from datetime import datetime, timedelta
from amocrm_sdk import tasks

task = tasks.create_task_for_entity(
    requester, tasks.ENTITY_TYPE_LEAD, 123, 1, "Call the client",
    datetime.now() + timedelta(days=1), 789,
)
tasks.complete_task(requester, task.id, "Done")
open_tasks = tasks.list_tasks(requester, 50, 1, {"is_completed": False})
tasks.delete_task(requester, task.id)
```

Status codes:

- `list_tasks` requires a 200 response. A non-empty filter is sent as a
  single `filter` parameter holding JSON.
- `get_task`, `create_task`, `update_task`, `complete_task` and
  `delete_task` accept any status code. They decode whatever body comes
  back.
- `create_task` raises `ApiError` when the answer holds no task.

## Unsorted requests

The request models live in `amocrm_sdk.unsorted_models`:

- `UnsortedLeadCreate`
- `UnsortedContactCreate`
- `UnsortedContact`
- `UnsortedCompany`
- `UnsortedMetadata`
- `UnsortedResponse`
- `UnsortedItem`
- `EmbeddedEntity`
- the enums `SourceType`, `CategoryType` and `PipelineType`

The calls live in `amocrm_sdk.unsorted`.

```python
from amocrm_sdk import unsorted
from amocrm_sdk.unsorted_models import (
    CategoryType, SourceType, UnsortedContact, UnsortedLeadCreate,
)

lead = UnsortedLeadCreate(
    source_name="Landing page",
    source_type=SourceType.API,
    category=CategoryType.FORMS,
    lead_name="New request",
    contact=UnsortedContact(name="Ivan", email="ivan@example.com"),
)
response = unsorted.create_unsorted_lead(requester, lead)
lead_id = unsorted.accept_unsorted_lead(requester, response.uid, 142, 456)

pending = unsorted.get_unsorted_contacts(requester, 1, 50, {"filter[category]": "forms"})
print(unsorted.get_unsorted_summary(requester))
```

How the create calls fill in missing values:

- `create_unsorted_lead` fills an unset `created_at` with the current time
  and an unset `pipeline_type` with `PipelineType.LEAD`. Both are written
  back to the object passed in.
- `create_unsorted_contact` fills in `created_at` the same way.

Other calls:

- `decline_unsorted_lead` and `decline_unsorted_contact` decline a request.
- `link_unsorted_lead_with_contact`, `link_unsorted_lead_with_company` and
  `link_unsorted_contact_with_company` link a request with an existing
  contact or company.

## Users

```python
from amocrm_sdk import users

me = users.get_current_user(requester)
print(me.name, me.rights.is_admin)
for user in users.list_users(requester, 50, 1):
    print(user.id, user.email)
print(users.get_user(requester, 123).lang)
```

## What it does not do

This is a library only. It has:

- no command-line tool;
- no OAuth flow or token refresh (`HttpRequester` sends the key it was
  given);
- no retries or rate limiting;
- no automatic pagination (every listing returns one page);
- no caching or local storage;
- no access to contacts, leads, companies, pipelines or other entities
  beyond the five areas above.