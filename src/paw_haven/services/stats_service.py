from decimal import Decimal

from paw_haven.data_access.dynamodb import DynamoDataAccess, from_dynamo

class StatsService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def totals(self) -> dict:
        donations = self.data_access.donations.find()
        total = sum((Decimal(str(d.get("donatedAmount", 0))) for d in donations), Decimal(0))
        return {
            "users": self.data_access.users.count(),
            "pets": self.data_access.pets.count(),
            "campaigns": self.data_access.campaigns.count(),
            "donations": len(donations),
            "adoptionRequests": self.data_access.adoption_requests.count(),
            "totalDonated": from_dynamo(total),
        }
