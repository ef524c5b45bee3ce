"""HTTP API for taskcalendar."""
