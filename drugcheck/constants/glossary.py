SEVERITY_BADGES = {
    # severity -> (badge label, css modifier)
    "HIGH": ("High risk", "high"),
    "MODERATE": ("Moderate", "moderate"),
    "LOW": ("Minor", "low"),
    "UNKNOWN": ("Unknown", "unknown"),
}

SECTION_LABELS = {
    "description": ("What happens (for the patient)", "Plain-language explanation of the interaction."),
    "mechanism": ("Scientific explanation (for the clinician)", "Pharmacological mechanism behind the interaction."),
    "management": ("Recommendation", "Practical steps to handle the interaction."),
}

ERROR_TITLES = {
    "validation": "Not enough drugs",
    "auth": "Configuration problem",
    "rate_limit": "Please wait",
    "unavailable": "Service busy",
    "data_format": "Unreadable reply",
    "unknown": "Notice",
}

SINGLE_DRUG_HINT = "Add another drug to run the analysis"

NO_INTERACTIONS_MESSAGE = "No interactions were found between these drugs."

STANDING_DISCLAIMER = (
    "This information is for educational and guidance purposes only and never replaces "
    "advice from your doctor or pharmacist. Never change your doses based on these results alone."
)

ONBOARDING_STEPS = [
    ("1. Add your drugs", "Type a drug name and press Add."),
    ("2. Check interactions", "The AI analyses the whole list."),
    ("3. Protect your health", "Read the recommendations or print the report for your doctor."),
]
