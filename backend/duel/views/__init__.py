from duel.views.profile_handlers import (
    get_history as get_history,
)
from duel.views.profile_handlers import (
    get_profile as get_profile,
)
from duel.views.profile_handlers import (
    get_stats as get_stats,
)
from duel.views.profile_handlers import (
    upsert_profile as upsert_profile,
)
from duel.views.room_handlers import (
    cleanup_rooms as cleanup_rooms,
)
from duel.views.room_handlers import (
    create_room as create_room,
)
from duel.views.room_handlers import (
    get_room as get_room,
)
from duel.views.room_handlers import (
    join_room as join_room,
)
from duel.views.room_handlers import (
    list_rooms as list_rooms,
)
from duel.views.room_handlers import (
    make_guess as make_guess,
)
from duel.views.room_handlers import (
    set_ready as set_ready,
)
from duel.views.room_handlers import (
    set_secret as set_secret,
)
from duel.views.room_handlers import (
    skip_turn as skip_turn,
)
