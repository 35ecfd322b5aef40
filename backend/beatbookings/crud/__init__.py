from . import crud_profile
from . import crud_artist
from . import crud_subscription
from . import crud_booking_request
from . import crud_booking
from . import crud_event
from . import crud_message
from . import crud_admin_message
from . import crud_media
from . import crud_review
from . import crud_favourite
from . import crud_availability
from . import crud_admin
from . import crud_notification
from . import crud_music_pool
