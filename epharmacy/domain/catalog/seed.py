"""Reference data loaded into an empty catalog on startup."""

COMMON_SYMPTOMS = [
    "Headache",
    "Fever",
    "Cough",
    "Sore throat",
    "Body ache",
    "Fatigue",
    "Nausea",
    "Runny nose",
    "Sneezing",
    "Congestion",
    "Dizziness",
    "Vomiting",
    "Diarrhea",
]

COMMON_MEDICATIONS = [
    {
        "name": "Acetaminophen 500mg",
        "description": "Pain reliever and fever reducer",
        "dosage": "Take 1 tablet every 6 hours as needed for fever or pain",
        "price": 799,
        "stock": 100,
    },
    {
        "name": "Phenylephrine Nasal Spray",
        "description": "Nasal decongestant",
        "dosage": "Use 1-2 sprays in each nostril every 4 hours as needed for congestion",
        "price": 1299,
        "stock": 50,
    },
    {
        "name": "Ibuprofen 200mg",
        "description": "NSAID pain reliever and anti-inflammatory",
        "dosage": "Take 1-2 tablets every 4-6 hours as needed for pain or inflammation",
        "price": 899,
        "stock": 75,
    },
    {
        "name": "Loratadine 10mg",
        "description": "Non-drowsy antihistamine for allergy relief",
        "dosage": "Take 1 tablet daily for allergy symptoms",
        "price": 1499,
        "stock": 60,
    },
    {
        "name": "Dextromethorphan Cough Syrup",
        "description": "Cough suppressant",
        "dosage": "Take 1-2 teaspoons every 4 hours as needed for cough",
        "price": 1099,
        "stock": 40,
    },
]
