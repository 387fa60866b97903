# clinic_portal/modules/doctors/schemas.py

from typing import List

from clinic_portal.models.records import CamelModel, DoctorProfile


class DoctorListData(CamelModel):
    doctors: List[DoctorProfile]
    total_count: int
