# app/core/constants.py

from app.models.enums import AchievementType

# ==========================================================
# SENTINELS
# ==========================================================
ALL_CATEGORIES = "All"
ALL_SUB_TYPES = "ALL"
ALL_LOCATIONS = "ALL"
ALL_LEVELS = "ALL"
ALL_POSITIONS = "All"

CERTIFICATE_FIELD = "certificatePath"
CERTIFICATE_LINK_LABEL = "View Certificate"

# ==========================================================
# FIELD LABELS (report column headers)
# ==========================================================
FIELD_LABELS = {
    # --- Student profile ---
    "uce": "UCE/USN",
    "Name": "Name",
    "DOB": "Date of Birth",
    "Gender": "Gender",
    "bloodGroup": "Blood Group",
    "Address": "Address",
    "Phone": "Phone Number",
    "Email": "Email",
    "Department": "Department",
    "Year": "Year of Study",
    "Semester": "Semester",
    "Section": "Section",
    "Batch": "Batch",
    "cgpa": "CGPA",
    # --- Academics ---
    "examType": "Exam Type",
    "schoolCollege": "School/College",
    "boardUniversity": "Board/University",
    "percentage": "Percentage",
    "marksheetPath": "Marksheet",
    # --- Achievement ---
    "type": "Achievement Type",
    "category": "Category",
    "level": "Level",
    "organizerLocation": "Organizer Location",
    "workshopLocation": "Workshop Location",
    "seminarLocation": "Seminar Location",
    "competitionLocation": "Competition Location",
    "otherLocation": "Other Location",
    "eventName": "Event Name",
    "workshopName": "Workshop Name",
    "seminarName": "Seminar Name",
    "organizerName": "Organizer Name",
    "eventDate": "Date",
    "projectTopic": "Project/Paper Topic",
    "position": "Position",
    "prize": "Prize",
    "title": "Title of Paper",
    "authors": "Authors",
    "author1": "Author 1",
    "author2": "Author 2",
    "author3": "Author 3",
    "journalConferenceName": "Journal/Conference Name",
    "publisherName": "Publisher Name",
    "publicationDate": "Publication Date",
    "indexing": "Indexing",
    "publicationType": "Publication Type",
    "courseName": "Course Name",
    "startMonth": "Start Month",
    "startYear": "Start Year",
    "endMonth": "End Month",
    "endYear": "End Year",
    "awardType": "Award Type",
    "amount": "Amount",
    "awardingOrganization": "Awarding Organization",
    "month": "Month",
    "year": "Year",
    "verificationStatus": "Verification Status",
    "verificationScore": "Verification Score",
    "awardedPoints": "Points",
    CERTIFICATE_FIELD: "Certificate",
}

STUDENT_FIELDS = [
    "uce", "Name", "DOB", "Gender", "bloodGroup", "Address", "Phone", "Email",
    "Department", "Year", "Semester", "Section", "Batch", "cgpa",
]

ACADEMIC_FIELDS = [
    "examType", "schoolCollege", "boardUniversity", "percentage", "marksheetPath",
]

# Fields read from the achievement row itself rather than its details bag
ACHIEVEMENT_COLUMN_FIELDS = [
    "type", "category", "level", "position",
    "verificationStatus", "verificationScore", "awardedPoints", CERTIFICATE_FIELD,
]

# ==========================================================
# SUB-TYPES PER ACHIEVEMENT TYPE
# ==========================================================
ACHIEVEMENT_SUB_TYPES = {
    AchievementType.CoCurricular: [
        "Workshop",
        "Seminar/Webinar",
        "Project Competition",
        "Paper Presentation",
        "Paper Publication",
        "Hackathon",
        "Code Competition",
        "Other",
    ],
    AchievementType.ExtraCurricular: ["Sports", "Cultural"],
    AchievementType.Courses: ["Coursera", "NPTEL", "Udemy", "Others"],
    AchievementType.SpecialAchievement: ["Scholarship", "Cash Prize"],
}

# Types whose achievements carry location / level / position
FILTERABLE_TYPES = {AchievementType.CoCurricular, AchievementType.ExtraCurricular}

FILTER_SPECIFIC_FIELDS = [
    "level",
    "position",
    "organizerLocation",
    "workshopLocation",
    "seminarLocation",
    "competitionLocation",
    "otherLocation",
]

SUB_TYPE_FIELDS = {
    "Workshop": ["workshopName", "organizerName", "eventDate", CERTIFICATE_FIELD],
    "Seminar/Webinar": ["seminarName", "organizerName", "eventDate", CERTIFICATE_FIELD],
    "Other": ["eventName", "organizerName", "eventDate", CERTIFICATE_FIELD],
    "Project Competition": ["projectTopic", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Paper Presentation": ["projectTopic", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Paper Publication": [
        "title", "author1", "author2", "author3", "journalConferenceName",
        "publisherName", "publicationDate", "indexing", "publicationType", CERTIFICATE_FIELD,
    ],
    "Hackathon": ["eventName", "organizerName", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Code Competition": ["eventName", "organizerName", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Sports": ["eventName", "organizerName", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Cultural": ["eventName", "organizerName", "eventDate", "position", "prize", CERTIFICATE_FIELD],
    "Coursera": ["courseName", "startMonth", "startYear", "endMonth", "endYear", CERTIFICATE_FIELD],
    "NPTEL": ["courseName", "startMonth", "startYear", "endMonth", "endYear", CERTIFICATE_FIELD],
    "Udemy": ["courseName", "startMonth", "startYear", "endMonth", "endYear", CERTIFICATE_FIELD],
    "Others": ["courseName", "startMonth", "startYear", "endMonth", "endYear", CERTIFICATE_FIELD],
    "Scholarship": ["awardType", "amount", "awardingOrganization", "startYear", "endYear", CERTIFICATE_FIELD],
    "Cash Prize": ["awardType", "amount", "awardingOrganization", "month", "year", CERTIFICATE_FIELD],
}

LOCATION_FIELDS = {
    "Workshop": "workshopLocation",
    "Seminar/Webinar": "seminarLocation",
    "Other": "otherLocation",
    "Hackathon": "organizerLocation",
    "Code Competition": "organizerLocation",
}
DEFAULT_LOCATION_FIELD = "competitionLocation"

LOCATION_OPTIONS = ["Within", "Outside"]
LEVEL_OPTIONS = ["International", "National", "State", "Inter College", "Intra College"]
POSITION_OPTIONS = ["Winner", "Runner-up", "Participation"]


def type_of_sub_type(sub_type: str) -> AchievementType | None:
    for achievement_type, sub_types in ACHIEVEMENT_SUB_TYPES.items():
        if sub_type in sub_types:
            return achievement_type
    return None


def location_field_for(sub_type: str | None) -> str:
    return LOCATION_FIELDS.get(sub_type or "", DEFAULT_LOCATION_FIELD)


def applicable_fields(sub_type: str) -> list[str]:
    """Registry fields for one sub-type, plus its location and level where it has them."""
    fields = list(SUB_TYPE_FIELDS.get(sub_type, []))
    if type_of_sub_type(sub_type) in FILTERABLE_TYPES:
        fields.extend([location_field_for(sub_type), "level"])
    return fields


def label_for(field: str) -> str:
    return FIELD_LABELS.get(field, field)
