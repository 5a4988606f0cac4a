"""
Game constants for Custom Monopoly.
All monetary values are in game dollars.
"""

# Board spaces
BOARD_SIZE = 40
STARTING_MONEY = 1500
SALARY_AMOUNT = 200  # Passing GO

GO_POSITION = 0
JAIL_POSITION = 10
GO_TO_JAIL_POSITION = 30

# Players
MIN_PLAYERS = 2
MAX_PLAYERS = 8
DEFAULT_NUMBER_OF_PLAYERS = 4
PLAYER_COLORS = [
    "#e74c3c", "#3498db", "#2ecc71", "#f39c12",
    "#9b59b6", "#e67e22", "#1abc9c", "#34495e",
]
FALLBACK_PLAYER_COLOR = "#95a5a6"

# Win conditions
WIN_MONEY_THRESHOLD = 5000
WIN_PROPERTY_THRESHOLD = 10

# Action card values used when a card carries none
DEFAULT_COLLECT_AMOUNT = 200
DEFAULT_PAY_AMOUNT = 100
DEFAULT_ADVANCE_SPACES = 3

DEFAULT_GAME_TITLE = "Custom Monopoly"

# Property catalog
# Format: (id, name, color, price, rent, description)
PROPERTY_CARDS = [
    # Azure
    ("1", "Azure Blob Storage", "azure", 60, 8, "Object storage for cloud applications"),
    ("6", "Azure File Storage", "azure", 80, 10, "Fully managed file shares in the cloud"),
    ("3", "Azure Virtual Machines", "azure", 100, 12, "Scalable computing in the cloud"),
    ("31", "Azure App Service", "azure", 300, 40, "Platform for building web apps"),
    ("37", "Azure Functions", "azure", 350, 50, "Serverless compute service"),
    ("8", "Azure SQL Database", "azure", 140, 18, "Managed relational database service"),
    ("9", "Azure Cosmos DB", "azure", 200, 26, "Globally distributed NoSQL database"),
    ("11", "Azure Virtual Network", "azure", 180, 24, "Private network in Azure"),
    ("33", "Azure Load Balancer", "azure", 220, 30, "Distribute network traffic"),
    ("15", "Azure Key Vault", "azure", 160, 20, "Secure key and secret management"),

    # AWS
    ("13", "Amazon S3", "aws", 60, 8, "Scalable object storage"),
    ("19", "Amazon EBS", "aws", 80, 10, "Block storage for EC2 instances"),
    ("14", "Amazon EC2", "aws", 100, 12, "Elastic compute cloud instances"),
    ("32", "AWS Lambda", "aws", 300, 40, "Serverless compute service"),
    ("35", "AWS Elastic Beanstalk", "aws", 350, 50, "Easy application deployment"),
    ("16", "Amazon RDS", "aws", 140, 18, "Managed relational database"),
    ("22", "Amazon DynamoDB", "aws", 200, 26, "NoSQL database service"),
    ("18", "Amazon VPC", "aws", 180, 24, "Virtual private cloud networking"),
    ("25", "Amazon CloudFront", "aws", 220, 30, "Content delivery network"),
    ("21", "AWS IAM", "aws", 160, 20, "Identity and access management"),

    # GCP
    ("23", "Cloud Storage", "gcp", 60, 8, "Unified object storage"),
    ("27", "Persistent Disk", "gcp", 80, 10, "Block storage for VMs"),
    ("24", "Compute Engine", "gcp", 100, 12, "Virtual machines on Google Cloud"),
    ("34", "Cloud Functions", "gcp", 300, 40, "Event-driven serverless functions"),
    ("39", "App Engine", "gcp", 400, 60, "Platform for building apps"),
    ("26", "Cloud SQL", "gcp", 140, 18, "Fully managed relational database"),
    ("28", "Firestore", "gcp", 200, 26, "NoSQL document database"),
    ("29", "VPC Network", "gcp", 180, 24, "Global virtual private cloud"),
    ("36", "Cloud Load Balancing", "gcp", 220, 30, "Global load balancing service"),
    ("38", "Cloud KMS", "gcp", 160, 20, "Key management service"),
]

# Board layout
# Format: (position, name, type, color, price, rent)
BOARD_SPACES = [
    (0, "START", "corner", None, None, None),
    (1, "Azure Blob Storage", "property", "azure", 60, 8),
    (2, "Question Card", "question", None, None, None),
    (3, "Azure Virtual Machines", "property", "azure", 100, 12),
    (4, "Action Card", "action", None, None, None),
    (5, "Azure File Storage", "property", "azure", 80, 10),
    (6, "Azure SQL Database", "property", "azure", 140, 18),
    (7, "Action Card", "action", None, None, None),
    (8, "Azure Virtual Network", "property", "azure", 180, 24),
    (9, "Azure Cosmos DB", "property", "azure", 200, 26),
    (10, "Security Audit", "jail", None, None, None),
    (11, "Azure Key Vault", "property", "azure", 160, 20),
    (12, "Question Card", "question", None, None, None),
    (13, "Amazon S3", "property", "aws", 60, 8),
    (14, "Amazon EC2", "property", "aws", 100, 12),
    (15, "Azure Load Balancer", "property", "azure", 220, 30),
    (16, "Amazon RDS", "property", "aws", 140, 18),
    (17, "Action Card", "action", None, None, None),
    (18, "Amazon VPC", "property", "aws", 180, 24),
    (19, "Amazon EBS", "property", "aws", 80, 10),
    (20, "Free Credits", "corner", None, None, None),
    (21, "AWS IAM", "property", "aws", 160, 20),
    (22, "Amazon DynamoDB", "property", "aws", 200, 26),
    (23, "Cloud Storage", "property", "gcp", 60, 8),
    (24, "Compute Engine", "property", "gcp", 100, 12),
    (25, "Amazon CloudFront", "property", "aws", 220, 30),
    (26, "Cloud SQL", "property", "gcp", 140, 18),
    (27, "Persistent Disk", "property", "gcp", 80, 10),
    (28, "Firestore", "property", "gcp", 200, 26),
    (29, "VPC Network", "property", "gcp", 180, 24),
    (30, "System Outage", "corner", None, None, None),
    (31, "Azure App Service", "property", "azure", 300, 40),
    (32, "AWS Lambda", "property", "aws", 300, 40),
    (33, "Question Card", "question", None, None, None),
    (34, "Cloud Functions", "property", "gcp", 300, 40),
    (35, "AWS Elastic Beanstalk", "property", "aws", 350, 50),
    (36, "Cloud Load Balancing", "property", "gcp", 220, 30),
    (37, "Azure Functions", "property", "azure", 350, 50),
    (38, "Cloud KMS", "property", "gcp", 160, 20),
    (39, "App Engine", "property", "gcp", 400, 60),
]

# Question cards
# Format: (id, question, options, correct_answer, reward, penalty)
QUESTION_CARDS = [
    ("q1", "What is 2 + 2?", ["3", "4", "5", "6"], 1, 100, 50),
    ("q2", "What is the capital of France?", ["London", "Berlin", "Paris", "Madrid"], 2, 150, 75),
    ("q3", "How many days are in a week?", ["5", "6", "7", "8"], 2, 100, 50),
    ("q4", "What color do you get when you mix red and yellow?",
     ["Purple", "Orange", "Green", "Blue"], 1, 125, 60),
    ("q5", "What is 10 x 3?", ["20", "25", "30", "35"], 2, 100, 50),
]

# Action cards
# Format: (id, title, description, effect, value)
ACTION_CARDS = [
    ("a1", "Go to Jail", "Go directly to jail, do not pass GO", "go-to-jail", None),
    ("a2", "Skip Turn", "Skip your next turn", "skip-turn", None),
    ("a3", "Extra Turn", "Take another turn!", "extra-turn", None),
    ("a4", "Bank Error", "Bank error in your favor - collect money", "collect-money", 200),
    ("a5", "Pay Tax", "Pay income tax", "pay-money", 100),
    ("a6", "Advance 3 Spaces", "Move forward 3 spaces", "advance-spaces", 3),
    ("a7", "Birthday Money", "Collect birthday money", "collect-money", 150),
    ("a8", "Parking Fine", "Pay parking fine", "pay-money", 75),
]
