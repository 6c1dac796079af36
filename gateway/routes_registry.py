"""
Homestay Gateway Routes Registry
Defines all API routes the gateway exposes
"""

from typing import List, Dict, Any

# Define all routes
SERVICE_ROUTES = [
    {"path": "/", "methods": ["GET"], "auth_required": False, "description": "Gateway info"},
    {"path": "/health", "methods": ["GET"], "auth_required": False, "description": "Gateway health check"},
    {"path": "/health/ready", "methods": ["GET"], "auth_required": False, "description": "Backend reachability"},
    {"path": "/health/live", "methods": ["GET"], "auth_required": False, "description": "Liveness probe"},
    # Auth
    {"path": "/api/auth/login", "methods": ["POST"], "auth_required": False, "description": "Sign in and set the session cookie"},
    {"path": "/api/auth/register", "methods": ["POST"], "auth_required": False, "description": "Register a guest account"},
    {"path": "/api/auth/logout", "methods": ["POST"], "auth_required": False, "description": "Clear the session cookie"},
    {"path": "/api/auth/session", "methods": ["GET"], "auth_required": False, "description": "Current session user"},
    {"path": "/api/auth/me", "methods": ["GET"], "auth_required": True, "description": "Validate the session with the backend"},
    {"path": "/api/auth/refresh", "methods": ["POST"], "auth_required": False, "description": "Refresh the backend token"},
    {"path": "/api/auth/session-update", "methods": ["POST"], "auth_required": True, "description": "Store new tokens in the session"},
    {"path": "/api/auth/validate-code", "methods": ["POST"], "auth_required": False, "description": "Validate an OTP code"},
    {"path": "/api/users/me", "methods": ["GET"], "auth_required": True, "description": "Profile for a bearer token"},
    # Verification
    {"path": "/api/verification/forgot-password", "methods": ["POST"], "auth_required": False, "description": "Send a password reset code"},
    {"path": "/api/verification/resend-verification", "methods": ["POST"], "auth_required": False, "description": "Resend the verification email"},
    {"path": "/api/verification/reset-password-code", "methods": ["POST"], "auth_required": False, "description": "Reset a password with a code"},
    {"path": "/api/verification/verify-code", "methods": ["POST"], "auth_required": False, "description": "Verify an email or mobile code"},
    {"path": "/api/email/contact-support", "methods": ["POST"], "auth_required": False, "description": "Send a support message"},
    # Onboarding
    {"path": "/api/onboarding/start", "methods": ["POST"], "auth_required": False, "description": "Start an onboarding session"},
    {"path": "/api/onboarding/step1/{session_id}", "methods": ["GET", "POST", "PATCH"], "auth_required": False, "description": "Owner and property basics"},
    {"path": "/api/onboarding/step2/{session_id}", "methods": ["GET", "POST", "PATCH"], "auth_required": False, "description": "Property images"},
    {"path": "/api/onboarding/step3/facilities", "methods": ["GET"], "auth_required": False, "description": "Facility catalogue"},
    {"path": "/api/onboarding/step3/{session_id}", "methods": ["GET", "POST", "PATCH"], "auth_required": False, "description": "Facilities"},
    {"path": "/api/onboarding/step4/{session_id}", "methods": ["GET", "POST", "PATCH"], "auth_required": False, "description": "Rooms"},
    {"path": "/api/onboarding/finalize/{session_id}", "methods": ["POST"], "auth_required": False, "description": "Submit the listing"},
    {"path": "/api/onboarding/{path}", "methods": ["GET", "POST", "PATCH"], "auth_required": False, "description": "Other onboarding calls"},
    # Campaign
    {"path": "/api/campaign", "methods": ["GET", "POST"], "auth_required": True, "description": "List or create campaigns"},
    {"path": "/api/campaign/qr-codes/generate", "methods": ["POST"], "auth_required": True, "description": "Generate QR codes"},
    {"path": "/api/campaign/qr-codes/{qr_code_id}", "methods": ["DELETE"], "auth_required": True, "description": "Delete a QR code"},
    {"path": "/api/campaign/qr/{qr_code}", "methods": ["GET"], "auth_required": False, "description": "Campaign for a QR code"},
    {"path": "/api/campaign/scan", "methods": ["POST"], "auth_required": False, "description": "Record a QR scan"},
    {"path": "/api/campaign/homestay/register", "methods": ["POST"], "auth_required": False, "description": "Register a homestay from a QR code"},
    {"path": "/api/campaign/homestay/bulk-register", "methods": ["POST"], "auth_required": True, "description": "Register several homestays"},
    {"path": "/api/campaign/review/verify-user", "methods": ["POST"], "auth_required": False, "description": "Look up a reviewer"},
    {"path": "/api/campaign/review/verify-otp", "methods": ["POST"], "auth_required": False, "description": "Verify a reviewer OTP"},
    {"path": "/api/campaign/review/complete-registration", "methods": ["POST"], "auth_required": False, "description": "Finish reviewer registration"},
    {"path": "/api/campaign/review/submit", "methods": ["POST"], "auth_required": False, "description": "Submit a review"},
    {"path": "/api/campaign/review/upload-images", "methods": ["POST"], "auth_required": False, "description": "Upload review images"},
    {"path": "/api/campaign/reviews/all", "methods": ["GET"], "auth_required": True, "description": "List reviews"},
    {"path": "/api/campaign/reviews/{review_id}/verify", "methods": ["PUT"], "auth_required": True, "description": "Verify a review"},
    {"path": "/api/campaign/reviews/{review_id}/respond", "methods": ["POST"], "auth_required": True, "description": "Respond to a review"},
    {"path": "/api/campaign/discounts/my", "methods": ["GET"], "auth_required": True, "description": "Discounts for the caller"},
    {"path": "/api/campaign/discounts/validate", "methods": ["POST"], "auth_required": False, "description": "Validate a discount code"},
    {"path": "/api/campaign/{campaign_id}", "methods": ["GET", "PUT", "DELETE"], "auth_required": True, "description": "Campaign detail"},
    {"path": "/api/campaign/{campaign_id}/homestays", "methods": ["GET"], "auth_required": True, "description": "Homestays in a campaign"},
    {"path": "/api/campaign/{campaign_id}/qr-codes", "methods": ["GET"], "auth_required": False, "description": "QR codes of a campaign"},
    # Bookings
    {"path": "/api/bookings/check-availability", "methods": ["POST"], "auth_required": False, "description": "Search available homestays"},
    {"path": "/api/bookings/check-availability/deals", "methods": ["POST"], "auth_required": False, "description": "Last-minute deals"},
    {"path": "/api/bookings/check-availability/{homestay_id}", "methods": ["POST"], "auth_required": False, "description": "Availability for one homestay"},
    {"path": "/api/bookings/locations/search", "methods": ["GET"], "auth_required": False, "description": "Location autocomplete"},
    {"path": "/api/bookings/guest", "methods": ["POST"], "auth_required": False, "description": "Create a guest booking"},
    {"path": "/api/bookings/confirm-payment", "methods": ["POST"], "auth_required": False, "description": "Confirm a paid booking"},
    {"path": "/api/communities/check-availability", "methods": ["POST"], "auth_required": False, "description": "Community availability"},
    {"path": "/api/communities/bookings", "methods": ["POST"], "auth_required": True, "description": "Book a community stay"},
    {"path": "/api/communities/bookings/guest", "methods": ["POST"], "auth_required": False, "description": "Guest community booking"},
    {"path": "/api/communities/{community_id}", "methods": ["GET"], "auth_required": False, "description": "Community detail"},
    # Payments
    {"path": "/api/stripe/checkout", "methods": ["POST"], "auth_required": False, "description": "Create a Stripe checkout session"},
    {"path": "/api/stripe/verify", "methods": ["POST"], "auth_required": False, "description": "Verify a Stripe payment"},
    {"path": "/api/khalti/initiate", "methods": ["POST"], "auth_required": False, "description": "Start a Khalti payment"},
    {"path": "/api/khalti/verify", "methods": ["POST"], "auth_required": False, "description": "Verify a Khalti payment"},
    {"path": "/api/esewa/initiate", "methods": ["POST"], "auth_required": False, "description": "Signed eSewa form fields"},
    {"path": "/api/esewa/verify", "methods": ["POST"], "auth_required": False, "description": "Verify an eSewa callback"},
    # Homestays
    {"path": "/api/homestays/search", "methods": ["GET"], "auth_required": False, "description": "Search homestays"},
    {"path": "/api/homestays/top-homestays", "methods": ["GET"], "auth_required": False, "description": "Top homestays"},
    {"path": "/api/homestays/last-minute-deals", "methods": ["GET"], "auth_required": False, "description": "Home page deals"},
    {"path": "/api/homestays/locations", "methods": ["GET"], "auth_required": False, "description": "Locations with homestays"},
    {"path": "/api/homestays/destinations/top", "methods": ["GET"], "auth_required": False, "description": "Top destinations"},
    {"path": "/api/homestays/destinations/{destination_id}", "methods": ["GET"], "auth_required": False, "description": "Homestays in a destination"},
    {"path": "/api/homestays/profile/{homestay_id}", "methods": ["GET"], "auth_required": False, "description": "Homestay profile"},
    {"path": "/api/homestays/slug/{slug}", "methods": ["GET", "POST"], "auth_required": False, "description": "Homestay by slug"},
    {"path": "/api/homestays/{homestay_id}", "methods": ["GET"], "auth_required": False, "description": "Homestay detail"},
    {"path": "/api/default/area-units", "methods": ["GET"], "auth_required": False, "description": "Area unit defaults"},
    {"path": "/api/default/bed-types", "methods": ["GET"], "auth_required": False, "description": "Bed type defaults"},
    {"path": "/api/default/currencies", "methods": ["GET"], "auth_required": False, "description": "Currency defaults"},
    {"path": "/api/s3/upload/{folder}", "methods": ["POST"], "auth_required": False, "description": "Upload a file"},
    # Sitemap
    {"path": "/api/sitemap/homestays", "methods": ["GET"], "auth_required": False, "description": "Approved homestays for the sitemap"},
    {"path": "/api/sitemap/update", "methods": ["GET", "POST"], "auth_required": True, "description": "Sitemap cache update"},
    {"path": "/api/sitemap/revalidate", "methods": ["GET", "POST"], "auth_required": True, "description": "Rebuild the sitemap cache"},
    # Backend proxy
    {"path": "/api/backend/{path}", "methods": ["GET", "POST", "PUT", "PATCH", "DELETE"], "auth_required": True, "description": "Authenticated backend proxy"},
]


def get_route_metadata() -> Dict[str, Any]:
    """
    Generate compact route metadata
    Groups routes by their first segment under /api
    """
    groups: Dict[str, List[str]] = {}
    methods = set()

    for route in SERVICE_ROUTES:
        path = route["path"]
        methods.update(route["methods"])

        if not path.startswith("/api/"):
            groups.setdefault("health", []).append(path)
            continue
        group = path[len("/api/"):].split("/", 1)[0]
        groups.setdefault(group, []).append(path)

    return {
        "route_count": str(len(SERVICE_ROUTES)),
        "base_path": "/api",
        "groups": ",".join(sorted(groups)),
        "methods": ",".join(sorted(methods)),
        "public_count": str(sum(1 for r in SERVICE_ROUTES if not r["auth_required"])),
        "protected_count": str(sum(1 for r in SERVICE_ROUTES if r["auth_required"])),
    }


# Service metadata
SERVICE_METADATA = {
    "service_name": "homestay_gateway",
    "version": "1.0.0",
    "tags": ["v1", "gateway", "homestay", "bff"],
    "capabilities": [
        "session_auth",
        "onboarding_wizard",
        "campaigns",
        "bookings",
        "payments",
        "sitemap_cache",
        "backend_proxy",
    ],
}
