from protrack.schemas.common import MaterialLine, PhotoUpload, StageBuckets, OperationResponse
from protrack.schemas.production_order import ProductionStatus, ProductionOrder, DemandCreate
from protrack.schemas.job_card import JobCard, JobCardCreate, PlanningBoard
from protrack.schemas.actual_entry import Narration, ActualEntry, ActualEntryCreate, running_hours
from protrack.schemas.crushing import CrushingEntry, CrushingCreate, CrushingSubmissionResult, CrushingItems
from protrack.schemas.tracker import TrackerSnapshot, AchievementItem, DashboardSummary
from protrack.schemas.auth import LoginRequest, UserRecord, ActiveViewUpdate, ActiveViewResponse
