# --- MOCK DATABASE ---
# Fixture records served by mock_catalog. Treat as read-only.

FIXTURE_NOW = "2024-01-15T10:00:00Z"

DEMO_USERS = {
    "OWNER": {
        "id": 1,
        "name": "Gym Owner",
        "email": "owner@gym.com",
        "createdAt": "2024-01-15T10:00:00Z",
    },
    "MEMBER": {
        "id": 2,
        "name": "John Member",
        "email": "member@gym.com",
        "createdAt": "2024-01-15T10:00:00Z",
    },
}

GYMS = [
    {
        "id": 1,
        "name": "PowerHouse Fitness",
        "address": "123 Fitness Street, Gym City",
        "phone": "+1234567890",
        "email": "powerhouse@gym.com",
        "description": "Premium fitness center with state-of-the-art equipment",
        "ownerId": 1,
        "status": "ACTIVE",
        "createdAt": "2024-01-15T10:00:00Z",
        "amenities": ["Cardio Zone", "Free Weights", "Sauna", "Parking"],
        "rating": 4.4,
        "reviewCount": 5,
        "fees": {"monthlyFee": 999.99, "quarterlyFee": 2499.99, "yearlyFee": 8999.99},
    },
    {
        "id": 2,
        "name": "Elite Gym",
        "address": "456 Strength Ave, Fitness Town",
        "phone": "+9876543210",
        "email": "elite@gym.com",
        "description": "Elite training facility",
        "ownerId": 1,
        "status": "ACTIVE",
        "createdAt": "2024-01-10T09:00:00Z",
        "amenities": ["CrossFit Box", "Pool", "Personal Training"],
        "rating": 4.7,
        "reviewCount": 0,
        "fees": {"monthlyFee": 1499.99, "quarterlyFee": 3599.99, "yearlyFee": 12999.99},
    },
]

MY_MEMBERSHIPS = [
    {
        "id": 1,
        "totalAmount": 4499.97,
        "durationMonths": 12,
        "startDate": "2024-02-01",
        "status": "ACTIVE",
        "createdAt": "2024-01-15T10:00:00Z",
        "approvalStatus": {"totalGyms": 2, "approvedGyms": 2, "pendingGyms": 0, "rejectedGyms": 0},
        "gyms": [
            {"gymId": 1, "gymName": "PowerHouse Fitness", "individualFee": 999.99, "status": "APPROVED"},
            {"gymId": 2, "gymName": "Elite Gym", "individualFee": 1499.99, "status": "APPROVED"},
        ],
    }
]

PENDING_APPROVALS = [
    {
        "membershipId": 2,
        "memberId": 3,
        "memberName": "Jane Smith",
        "memberPhone": "+1111111111",
        "gymId": 1,
        "gymName": "PowerHouse Fitness",
        "individualFee": 999.99,
        "requestedAt": "2024-01-15T09:00:00Z",
        "status": "PENDING",
    },
    {
        "membershipId": 3,
        "memberId": 4,
        "memberName": "Bob Johnson",
        "memberPhone": "+2222222222",
        "gymId": 1,
        "gymName": "PowerHouse Fitness",
        "individualFee": 999.99,
        "requestedAt": "2024-01-15T08:30:00Z",
        "status": "PENDING",
    },
]

MY_ATTENDANCE = [
    {"id": 1, "gymId": 1, "gymName": "PowerHouse Fitness", "checkInTime": "2024-01-14T18:30:00Z",
     "checkOutTime": "2024-01-14T20:15:00Z", "duration": "PT1H45M", "status": "CHECKED_OUT"},
    {"id": 2, "gymId": 1, "gymName": "PowerHouse Fitness", "checkInTime": "2024-01-12T07:00:00Z",
     "checkOutTime": "2024-01-12T08:30:00Z", "duration": "PT1H30M", "status": "CHECKED_OUT"},
    {"id": 3, "gymId": 2, "gymName": "Elite Gym", "checkInTime": "2024-01-10T19:15:00Z",
     "checkOutTime": "2024-01-10T21:15:00Z", "duration": "PT2H", "status": "CHECKED_OUT"},
]

GYM_MEMBERS = [
    {"id": 2, "gymId": 1, "name": "John Member", "phone": "+9876543210", "membershipType": "Premium",
     "joinedAt": "2024-02-01", "status": "ACTIVE"},
    {"id": 5, "gymId": 1, "name": "Sarah Wilson", "phone": "+3333333333", "membershipType": "Premium",
     "joinedAt": "2023-11-20", "status": "ACTIVE"},
    {"id": 6, "gymId": 1, "name": "Mike Johnson", "phone": "+4444444444", "membershipType": "Standard",
     "joinedAt": "2023-09-02", "status": "ACTIVE"},
    {"id": 7, "gymId": 1, "name": "Emily Davis", "phone": "+5555555555", "membershipType": "Basic",
     "joinedAt": "2023-06-14", "status": "INACTIVE"},
    {"id": 2, "gymId": 2, "name": "John Member", "phone": "+9876543210", "membershipType": "Premium",
     "joinedAt": "2024-02-01", "status": "ACTIVE"},
]

GYM_ATTENDANCE = [
    {"id": "a1", "gymId": 1, "memberId": 5, "memberName": "Sarah Wilson", "date": "2024-01-15",
     "checkIn": "06:30", "checkOut": "08:00", "duration": 90, "membershipType": "Premium"},
    {"id": "a2", "gymId": 1, "memberId": 6, "memberName": "Mike Johnson", "date": "2024-01-15",
     "checkIn": "07:15", "checkOut": "08:30", "duration": 75, "membershipType": "Standard"},
    {"id": "a3", "gymId": 1, "memberId": 2, "memberName": "John Member", "date": "2024-01-14",
     "checkIn": "18:30", "checkOut": "20:15", "duration": 105, "membershipType": "Premium"},
    {"id": "a4", "gymId": 1, "memberId": 5, "memberName": "Sarah Wilson", "date": "2024-01-13",
     "checkIn": "06:45", "checkOut": "07:45", "duration": 60, "membershipType": "Premium"},
    {"id": "a5", "gymId": 2, "memberId": 2, "memberName": "John Member", "date": "2024-01-10",
     "checkIn": "19:15", "checkOut": "21:15", "duration": 120, "membershipType": "Premium"},
]

TRAINERS = [
    {
        "id": "t1",
        "firstName": "Rahul",
        "lastName": "Verma",
        "email": "rahul@powerhouse.com",
        "phone": "+9123456780",
        "role": "head_trainer",
        "status": "active",
        "specialization": ["weight_training", "crossfit"],
        "yearsOfExperience": 9,
        "assignedGymId": "1",
        "certifications": [],
        "availability": [{"day": "Monday", "startTime": "06:00", "endTime": "14:00", "isAvailable": True}],
        "createdAt": "2023-08-01T10:00:00Z",
        "updatedAt": "2024-01-02T10:00:00Z",
    },
    {
        "id": "t2",
        "firstName": "Priya",
        "lastName": "Nair",
        "email": "priya@powerhouse.com",
        "phone": "+9123456781",
        "role": "trainer",
        "status": "active",
        "specialization": ["yoga", "pilates"],
        "yearsOfExperience": 4,
        "assignedGymId": "1",
        "certifications": [],
        "availability": [{"day": "Tuesday", "startTime": "16:00", "endTime": "21:00", "isAvailable": True}],
        "createdAt": "2023-10-12T10:00:00Z",
        "updatedAt": "2023-12-20T10:00:00Z",
    },
    {
        "id": "t3",
        "firstName": "Karan",
        "lastName": "Mehta",
        "email": None,
        "phone": "+9123456782",
        "role": "senior_trainer",
        "status": "inactive",
        "specialization": ["hiit", "cardio"],
        "yearsOfExperience": 6,
        "assignedGymId": "2",
        "certifications": [],
        "availability": [],
        "createdAt": "2023-05-03T10:00:00Z",
        "updatedAt": "2023-11-30T10:00:00Z",
    },
]

EXPENSES = [
    {"id": "e1", "date": "2024-01-03", "category": "EQUIPMENT", "amount": 15000, "description": "New treadmill",
     "paymentMethod": "CARD", "paidById": "1", "paidByName": "Gym Owner", "receiptUrl": "",
     "createdAt": "2024-01-03T12:00:00Z", "updatedAt": "2024-01-03T12:00:00Z"},
    {"id": "e2", "date": "2024-01-05", "category": "RENT", "amount": 45000, "description": "January rent",
     "paymentMethod": "BANK_TRANSFER", "paidById": "1", "paidByName": "Gym Owner", "receiptUrl": "",
     "createdAt": "2024-01-05T09:00:00Z", "updatedAt": "2024-01-05T09:00:00Z"},
    {"id": "e3", "date": "2024-01-08", "category": "UTILITY", "amount": 6200, "description": "Electricity bill",
     "paymentMethod": "UPI", "paidById": "1", "paidByName": "Gym Owner", "receiptUrl": "",
     "createdAt": "2024-01-08T15:30:00Z", "updatedAt": "2024-01-08T15:30:00Z"},
    {"id": "e4", "date": "2024-01-12", "category": "MAINTENANCE", "amount": 3500, "description": "Cable machine repair",
     "paymentMethod": "CASH", "paidById": "1", "paidByName": "Gym Owner", "receiptUrl": "",
     "createdAt": "2024-01-12T11:00:00Z", "updatedAt": "2024-01-12T11:00:00Z"},
]

REVIEWS = [
    {"id": "1", "gymId": 1, "memberName": "Sarah Wilson", "rating": 5, "date": "2024-01-10", "membershipType": "Premium",
     "comment": "Amazing gym with top-notch equipment! The staff is incredibly helpful and the facility is always clean.",
     "responded": False, "response": None, "helpful": 12},
    {"id": "2", "gymId": 1, "memberName": "Mike Johnson", "rating": 4, "date": "2024-01-08", "membershipType": "Standard",
     "comment": "Great variety of equipment and good atmosphere. It can get crowded during peak hours.",
     "responded": True, "response": "Thank you for your feedback, Mike! We're working on expanding our peak hour capacity.",
     "helpful": 8},
    {"id": "3", "gymId": 1, "memberName": "Emily Davis", "rating": 5, "date": "2024-01-05", "membershipType": "Basic",
     "comment": "Love this place! The group classes are fantastic and the instructors are very motivating.",
     "responded": False, "response": None, "helpful": 15},
    {"id": "4", "gymId": 1, "memberName": "John Doe", "rating": 3, "date": "2024-01-03", "membershipType": "Standard",
     "comment": "Decent gym but could use more cardio machines. Treadmill waits are long in the evening.",
     "responded": False, "response": None, "helpful": 5},
    {"id": "5", "gymId": 1, "memberName": "Alex Thompson", "rating": 5, "date": "2024-01-01", "membershipType": "Premium",
     "comment": "Excellent gym! The personal trainers are knowledgeable and the equipment is well-maintained.",
     "responded": True, "response": "Thank you so much, Alex! We're thrilled that you're enjoying your experience with us.",
     "helpful": 20},
]
