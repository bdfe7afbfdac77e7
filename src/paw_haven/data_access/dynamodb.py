import logging
import math
import uuid
from collections import Counter
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator

from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import ClientError

from paw_haven.core.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

ENTITY_INDEX = "EntityIndex"

USER_ENTITY = "USER"
PET_ENTITY = "PET"
CAMPAIGN_ENTITY = "CAMPAIGN"
DONATION_ENTITY = "DONATION"
ADOPTION_REQUEST_ENTITY = "ADOPTION_REQUEST"

DOCUMENT_SK = "META"
PROFILE_SK = "PROFILE"
SEARCH_ATTR = "searchText"

INTERNAL_ATTRS = {"PK", "SK", "entity", SEARCH_ATTR}
PROTECTED_FIELDS = {"id", "createdAt"}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def slugify(value: str) -> str:
    return value.lower().replace(" ", "-")


def to_dynamo(value: Any) -> Any:
    # boto3 refuses floats
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


def condition_failed(error: ClientError) -> bool:
    return error.response["Error"]["Code"] == "ConditionalCheckFailedException"


def create_table(dynamodb, table_name: str):
    table = dynamodb.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "entity", "AttributeType": "S"},
            {"AttributeName": "createdAt", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": ENTITY_INDEX,
                "KeySchema": [
                    {"AttributeName": "entity", "KeyType": "HASH"},
                    {"AttributeName": "createdAt", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


class DocumentStore:
    """One logical collection inside the single table.

    Items are keyed ``<ENTITY>#<key>`` and listed newest first through
    the entity index.
    """

    def __init__(self, table, entity: str, key_field: str = "id",
                 sort_key: str = DOCUMENT_SK, search_field: str | None = None):
        self.table = table
        self.entity = entity
        self.key_field = key_field
        self.sort_key = sort_key
        self.search_field = search_field
        self.resource = entity.lower().replace("_", " ")

    def key(self, key: str) -> dict:
        return {"PK": f"{self.entity}#{key}", "SK": self.sort_key}

    def prepare(self, doc: dict) -> dict:
        """Assign the key and creation time and build the stored item."""
        doc = {k: v for k, v in doc.items() if k not in INTERNAL_ATTRS}
        if self.key_field != "id" and not doc.get(self.key_field):
            raise InvalidInputError(f"{self.key_field} is required", field=self.key_field)
        doc["id"] = str(uuid.uuid4())
        doc["createdAt"] = utc_now()

        item = to_dynamo(doc)
        item.update(self.key(doc[self.key_field]))
        item["entity"] = self.entity
        if self.search_field and isinstance(doc.get(self.search_field), str):
            item[SEARCH_ATTR] = doc[self.search_field].lower()
        return item

    @staticmethod
    def to_document(item: dict) -> dict:
        return from_dynamo({k: v for k, v in item.items() if k not in INTERNAL_ATTRS})

    def create(self, doc: dict) -> dict:
        item = self.prepare(doc)
        key = item[self.key_field]
        try:
            self.table.put_item(Item=item, ConditionExpression=Attr("PK").not_exists())
        except ClientError as e:
            if condition_failed(e):
                logger.info(f"{self.resource} {key} already exists")
                raise ConflictError(f"{self.resource} '{key}' already exists")
            raise
        return {"insertedId": key}

    def get(self, key: str) -> dict:
        response = self.table.get_item(Key=self.key(key))
        item = response.get("Item")
        if item is None:
            raise NotFoundError(self.resource, key)
        return self.to_document(item)

    def _condition(self, filters: dict | None = None, search: str | None = None,
                   exclude: dict | None = None) -> ConditionBase | None:
        clauses = [Attr(field).eq(to_dynamo(value)) for field, value in (filters or {}).items()]
        clauses += [Attr(field).ne(to_dynamo(value)) for field, value in (exclude or {}).items()]
        if search:
            clauses.append(Attr(SEARCH_ATTR).contains(search.lower()))

        condition = None
        for clause in clauses:
            condition = clause if condition is None else condition & clause
        return condition

    def _query(self, condition: ConditionBase | None, **kwargs) -> Iterator[dict]:
        params = {
            "IndexName": ENTITY_INDEX,
            "KeyConditionExpression": Key("entity").eq(self.entity),
            "ScanIndexForward": False,
            **kwargs,
        }
        if condition is not None:
            params["FilterExpression"] = condition

        while True:
            response = self.table.query(**params)
            yield response
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

    def find(self, filters: dict | None = None, search: str | None = None,
             exclude: dict | None = None, limit: int | None = None) -> list[dict]:
        documents = []
        for response in self._query(self._condition(filters, search, exclude)):
            documents.extend(self.to_document(item) for item in response.get("Items", []))
            if limit is not None and len(documents) >= limit:
                return documents[:limit]
        return documents

    def find_one(self, **filters) -> dict | None:
        documents = self.find(filters, limit=1)
        return documents[0] if documents else None

    def count(self, filters: dict | None = None) -> int:
        return sum(
            response.get("Count", 0)
            for response in self._query(self._condition(filters), Select="COUNT")
        )

    def list_page(self, page: int = 1, limit: int = 10, filters: dict | None = None,
                  search: str | None = None) -> dict:
        if page < 1 or limit < 1:
            raise InvalidInputError("page and limit must be positive integers")

        documents = self.find(filters, search)
        total = len(documents)
        skip = (page - 1) * limit
        return {
            "items": documents[skip:skip + limit],
            "page": page,
            "totalPages": math.ceil(total / limit),
            "totalCount": total,
            "nextPage": page + 1 if page * limit < total else None,
        }

    def update(self, key: str, patch: dict, upsert: bool = False, insert: dict | None = None) -> dict:
        """Set the patched fields on an existing document.

        A missing document raises ``NotFoundError`` unless ``upsert`` is
        set, in which case the patch is inserted under a fresh id together
        with the ``insert`` fields (owner, defaults), which take precedence.
        """
        changes = {
            field: value for field, value in patch.items()
            if field not in PROTECTED_FIELDS | INTERNAL_ATTRS and field != self.key_field
        }

        if not changes:
            try:
                self.get(key)
            except NotFoundError:
                if not upsert:
                    raise
                return self._upsert(key, {**changes, **(insert or {})})
            return {"matchedCount": 1, "modifiedCount": 0}

        names, values, assignments = {}, {}, []
        for i, (field, value) in enumerate(changes.items()):
            names[f"#attr{i}"] = field
            values[f":val{i}"] = to_dynamo(value)
            assignments.append(f"#attr{i} = :val{i}")
        if self.search_field in changes and isinstance(changes[self.search_field], str):
            names["#search"] = SEARCH_ATTR
            values[":search"] = changes[self.search_field].lower()
            assignments.append("#search = :search")

        try:
            response = self.table.update_item(
                Key=self.key(key),
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=Attr("PK").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_OLD",
            )
        except ClientError as e:
            if not condition_failed(e):
                raise
            if not upsert:
                raise NotFoundError(self.resource, key)
            return self._upsert(key, {**changes, **(insert or {})})

        old = self.to_document(response.get("Attributes", {}))
        modified = any(old.get(field) != from_dynamo(to_dynamo(value)) for field, value in changes.items())
        return {"matchedCount": 1, "modifiedCount": 1 if modified else 0}

    def _upsert(self, key: str, changes: dict) -> dict:
        inserted = self.create(changes)
        logger.info(f"Upserted {self.resource} {inserted['insertedId']} in place of missing {key}")
        return {"matchedCount": 0, "modifiedCount": 0, "upsertedId": inserted["insertedId"]}

    def toggle(self, key: str, field: str) -> dict:
        doc = self.get(key)
        current = bool(doc.get(field, False))
        observed = Attr(field).eq(doc[field]) if field in doc else Attr(field).not_exists()

        try:
            self.table.update_item(
                Key=self.key(key),
                UpdateExpression="SET #attr0 = :val0",
                ConditionExpression=Attr("PK").exists() & observed,
                ExpressionAttributeNames={"#attr0": field},
                ExpressionAttributeValues={":val0": not current},
            )
        except ClientError as e:
            if condition_failed(e):
                logger.info(f"Lost race toggling {field} on {self.resource} {key}")
                raise ConflictError()
            raise
        return {"matchedCount": 1, "modifiedCount": 1, field: not current}

    def add(self, key: str, deltas: dict[str, Any], condition: ConditionBase | None = None) -> dict | None:
        """Atomically add numeric deltas; returns None when the condition fails."""
        names, values, additions = {}, {}, []
        for i, (field, delta) in enumerate(deltas.items()):
            names[f"#attr{i}"] = field
            values[f":val{i}"] = to_dynamo(delta)
            additions.append(f"#attr{i} :val{i}")

        guard = Attr("PK").exists()
        if condition is not None:
            guard = guard & condition

        try:
            response = self.table.update_item(
                Key=self.key(key),
                UpdateExpression="ADD " + ", ".join(additions),
                ConditionExpression=guard,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if condition_failed(e):
                logger.info(f"Conditional update rejected for {self.resource} {key}")
                return None
            raise
        return self.to_document(response["Attributes"])

    def delete(self, key: str) -> dict:
        response = self.table.delete_item(Key=self.key(key), ReturnValues="ALL_OLD")
        return {"deletedCount": 1 if response.get("Attributes") else 0}

    def category_counts(self, field: str = "category") -> list[dict]:
        counts = Counter(doc[field] for doc in self.find() if doc.get(field))
        return [
            {"category": category, "slug": slugify(category), "count": count}
            for category, count in sorted(counts.items())
        ]


class DynamoDataAccess:
    def __init__(self, table):
        self.table = table
        self.users = DocumentStore(table, USER_ENTITY, key_field="email", sort_key=PROFILE_SK)
        self.pets = DocumentStore(table, PET_ENTITY, search_field="name")
        self.campaigns = DocumentStore(table, CAMPAIGN_ENTITY)
        self.donations = DocumentStore(table, DONATION_ENTITY)
        self.adoption_requests = DocumentStore(table, ADOPTION_REQUEST_ENTITY)

    def ping(self) -> None:
        self.table.load()

    def record_donation(self, donation: dict, campaign_id: str, amount: Decimal,
                        expected_max: Decimal, ceiling: Decimal) -> str | None:
        """Insert a donation and credit its campaign in one transaction.

        The campaign is credited only while it is running, its
        ``maxDonation`` is still ``expected_max`` and its
        ``currentDonation`` is at most ``ceiling``. Returns the new
        donation id, or None when the transaction was cancelled.
        """
        item = self.donations.prepare(donation)
        try:
            self.table.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": item,
                            "ConditionExpression": "attribute_not_exists(PK)",
                        }
                    },
                    {
                        "Update": {
                            "TableName": self.table.name,
                            "Key": self.campaigns.key(campaign_id),
                            "UpdateExpression": "ADD currentDonation :amount, donors :one",
                            "ConditionExpression": (
                                "attribute_exists(PK) AND isPaused = :running "
                                "AND maxDonation = :max AND currentDonation <= :ceiling"
                            ),
                            "ExpressionAttributeValues": {
                                ":amount": amount,
                                ":one": 1,
                                ":running": False,
                                ":max": expected_max,
                                ":ceiling": ceiling,
                            },
                        }
                    },
                ]
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "TransactionCanceledException":
                logger.info(f"Donation to campaign {campaign_id} cancelled: {e}")
                return None
            raise
        return item["id"]
