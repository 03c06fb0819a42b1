# Persistence models - imported here so Base.metadata is complete
from gymadmin.models.classModel import ClassScheduleRecord, ClassInstanceRecord
from gymadmin.models.membershipsModel import MembershipPlan, MemberMembershipRecord

__all__ = [
    "ClassScheduleRecord", "ClassInstanceRecord",
    "MembershipPlan", "MemberMembershipRecord"
]
