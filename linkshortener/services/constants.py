# Event codes attached to log records as `extra={'event': ...}`

# Creation workflow
BATCH_VALIDATION_FAILED = 'BATCH_VALIDATION_FAILED'
SHORTCODE_ALLOCATED = 'SHORTCODE_ALLOCATED'
LINKS_CREATED = 'LINKS_CREATED'
PERSISTENCE_FAILED = 'PERSISTENCE_FAILED'

# Link resolution
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
SHORT_LINK_EXPIRED = 'SHORT_LINK_EXPIRED'
SHORT_LINK_DEACTIVATED = 'SHORT_LINK_DEACTIVATED'
CLICK_RECORDED = 'CLICK_RECORDED'
CLICK_NOT_RECORDED = 'CLICK_NOT_RECORDED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'

# Store administration
LINK_DEACTIVATED = 'LINK_DEACTIVATED'
STORE_CLEARED = 'STORE_CLEARED'

# Human-readable reasons for non-redirect resolution outcomes
REASON_MISSING_SHORTCODE = 'No shortcode provided'
REASON_NOT_FOUND = 'Short URL not found. It may have been deleted or never existed.'
REASON_EXPIRED = 'This short URL has expired.'
REASON_DEACTIVATED = 'This short URL has been deactivated.'
