from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.models.donation import AdoptionRequest

class AdoptionService:
    def __init__(self, data_access: DynamoDataAccess):
        self.requests = data_access.adoption_requests

    def request(self, body: dict, requester_email: str) -> dict:
        doc = AdoptionRequest(**{**body, "addedBy": requester_email})
        return self.requests.create(doc.model_dump())

    def for_requester(self, email: str) -> list[dict]:
        return self.requests.find({"addedBy": email})
