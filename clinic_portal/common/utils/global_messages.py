class GlobalMessages:
    # Auth Messages
    UNAUTHORIZED = "Unauthorized"
    INVALID_CREDENTIALS = "Invalid credentials provided."
    ACCOUNT_ALREADY_EXISTS = "A user with this email already exists."
    ACCOUNT_CREATED = "Account created successfully."
    LOGIN_SUCCESS = "Login successful."
    AUTH_HEADER_MISSING = "Authorization header is missing."
    DOCTOR_ONLY = "Unauthorized - Doctor access only"
    PATIENT_ONLY = "Unauthorized - Patient access only"

    # User Messages
    PROFILE_NOT_FOUND = "User profile not found"
    PROFILE_UPDATED = "Profile updated successfully"

    # Domain Messages
    DOCTOR_NOT_FOUND = "Doctor not found"
    PATIENT_NOT_FOUND = "Patient not found"
    APPOINTMENT_NOT_FOUND = "Appointment not found"
    APPOINTMENT_BOOKED = "Appointment booked successfully"
    APPOINTMENT_UPDATED = "Appointment updated successfully"
    APPOINTMENT_CANCELLED = "Appointment cancelled successfully"
    ONLY_PATIENTS_BOOK = "Only patients can book appointments"
    ONLY_DOCTORS_UPDATE = "Only doctors can update appointment status"
    ONLY_PATIENTS_CANCEL = "Only patients can cancel appointments"
    PRESCRIPTION_NOT_FOUND = "Prescription not found"
    PRESCRIPTION_ADDED = "Prescription added successfully"
    PRESCRIPTION_UPDATED = "Prescription updated successfully"
    PRESCRIPTION_DELETED = "Prescription deleted successfully"
    REPORT_NOT_FOUND = "Report not found"
    REPORT_UPLOADED = "Report uploaded successfully"
    REPORT_UPDATED = "Report updated successfully"
    REPORT_DELETED = "Report deleted successfully"
    REPORT_ANALYZED = "Report analyzed successfully"
    REPORT_ANALYSIS_FAILED = "Report analysis failed"
    SAMPLE_DATA_INITIALIZED = "Sample data initialized"
    SAMPLE_DATA_ALREADY_PRESENT = "Sample data already initialized"
    INTERNAL_ERROR = "Internal server error"
