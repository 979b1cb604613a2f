"""Static catalogs: application actions, error codes, warning types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Action:
    name: str
    success_msg: str
    fail_msg: str
    warning_msg: str | None = None


ACTIONS: tuple[Action, ...] = (
    # Authentication & User Management (10 actions)
    Action("login", "User login successful", "Login failed - authentication error", "Multiple login attempts detected"),
    Action("logout", "User logged out successfully", "Logout failed - session error", "Session expired during logout"),
    Action("signup", "User registration completed", "Signup failed - validation error", "Email already exists"),
    Action("password_reset", "Password reset successful", "Password reset failed", "Reset token expired"),
    Action("email_verification", "Email verified successfully", "Email verification failed", "Verification link expired"),
    Action("two_factor_auth", "2FA authentication successful", "2FA verification failed", "Invalid 2FA code"),
    Action("oauth_login", "OAuth login successful", "OAuth provider error", "OAuth token refresh needed"),
    Action("session_refresh", "Session refreshed", "Session refresh failed", "Session about to expire"),
    Action("account_deactivation", "Account deactivated", "Account deactivation failed", "Pending transactions exist"),
    Action("permission_check", "Permission verified", "Permission denied", "Insufficient privileges"),

    # Profile & Settings (10 actions)
    Action("update_profile", "Profile updated successfully", "Profile update failed", "Invalid profile data"),
    Action("upload_avatar", "Avatar uploaded", "Avatar upload failed", "Image size too large"),
    Action("change_password", "Password changed", "Password change failed", "Weak password detected"),
    Action("update_email", "Email updated", "Email update failed", "Email verification required"),
    Action("update_phone", "Phone number updated", "Phone update failed", "Invalid phone format"),
    Action("privacy_settings", "Privacy settings updated", "Settings update failed", "Some settings require verification"),
    Action("notification_preferences", "Notifications updated", "Preference update failed", "Invalid notification channel"),
    Action("language_change", "Language preference updated", "Language change failed", "Unsupported locale"),
    Action("timezone_update", "Timezone updated", "Timezone update failed", "Invalid timezone"),
    Action("delete_account", "Account deletion initiated", "Account deletion failed", "Cooling period active"),

    # E-commerce & Shopping (15 actions)
    Action("view_product", "Product page viewed", "Product not found", "Product availability low"),
    Action("search_products", "Search completed", "Search service error", "No results found"),
    Action("add_to_cart", "Item added to cart", "Failed to add to cart", "Item limited quantity"),
    Action("remove_from_cart", "Item removed from cart", "Cart update failed", "Cart empty"),
    Action("update_cart_quantity", "Cart quantity updated", "Quantity update failed", "Exceeds available stock"),
    Action("apply_coupon", "Coupon applied", "Invalid coupon code", "Coupon expires soon"),
    Action("checkout", "Checkout completed", "Checkout failed", "Inventory verification needed"),
    Action("payment_processing", "Payment processed", "Payment declined", "Payment method verification required"),
    Action("order_confirmation", "Order confirmed", "Order confirmation failed", "Delivery delay expected"),
    Action("add_to_wishlist", "Added to wishlist", "Wishlist update failed", "Wishlist full"),
    Action("product_review", "Review submitted", "Review submission failed", "Review pending moderation"),
    Action("price_comparison", "Price comparison loaded", "Comparison service unavailable", "Limited data available"),
    Action("track_order", "Order tracking loaded", "Tracking unavailable", "Tracking information delayed"),
    Action("refund_request", "Refund initiated", "Refund request failed", "Outside refund window"),
    Action("invoice_download", "Invoice downloaded", "Invoice generation failed", "Invoice processing"),

    # Content & Media (12 actions)
    Action("upload_image", "Image uploaded", "Image upload failed", "Image compression applied"),
    Action("upload_video", "Video uploaded", "Video upload failed", "Video processing queued"),
    Action("upload_document", "Document uploaded", "Document upload failed", "Document size limit exceeded"),
    Action("download_file", "File downloaded", "Download failed", "Slow download speed"),
    Action("stream_video", "Video streaming", "Streaming failed", "Buffering detected"),
    Action("create_post", "Post created", "Post creation failed", "Content flagged for review"),
    Action("edit_post", "Post updated", "Post update failed", "Edit history maintained"),
    Action("delete_post", "Post deleted", "Post deletion failed", "Soft delete applied"),
    Action("like_content", "Content liked", "Like action failed", "Like limit reached"),
    Action("share_content", "Content shared", "Share failed", "Share quota exceeded"),
    Action("comment", "Comment posted", "Comment failed", "Comment requires moderation"),
    Action("report_content", "Content reported", "Report submission failed", "Duplicate report"),

    # API & Integration (10 actions)
    Action("api_call", "API request successful", "API request failed", "API rate limit approaching"),
    Action("webhook_trigger", "Webhook delivered", "Webhook delivery failed", "Webhook retry scheduled"),
    Action("data_sync", "Data synchronized", "Sync failed", "Partial sync completed"),
    Action("export_data", "Data exported", "Export failed", "Large export queued"),
    Action("import_data", "Data imported", "Import failed", "Data validation issues"),
    Action("batch_process", "Batch processing complete", "Batch processing failed", "Some items skipped"),
    Action("cache_refresh", "Cache refreshed", "Cache refresh failed", "Stale cache detected"),
    Action("database_query", "Query executed", "Query timeout", "Slow query detected"),
    Action("external_api_call", "External API responded", "External API unavailable", "External API slow response"),
    Action("graphql_query", "GraphQL query successful", "GraphQL query failed", "Query complexity high"),

    # Analytics & Reporting (8 actions)
    Action("generate_report", "Report generated", "Report generation failed", "Report data incomplete"),
    Action("analytics_track", "Event tracked", "Tracking failed", "Tracking delayed"),
    Action("dashboard_load", "Dashboard loaded", "Dashboard load failed", "Dashboard data stale"),
    Action("metrics_query", "Metrics retrieved", "Metrics unavailable", "Metrics aggregation delayed"),
    Action("export_analytics", "Analytics exported", "Export failed", "Export size limit reached"),
    Action("ab_test_assignment", "A/B test variant assigned", "Test assignment failed", "Test quota reached"),
    Action("funnel_analysis", "Funnel analyzed", "Analysis failed", "Insufficient data"),
    Action("cohort_analysis", "Cohort analysis complete", "Cohort analysis failed", "Small cohort size"),

    # Messaging & Communication (10 actions)
    Action("send_message", "Message sent", "Message delivery failed", "Message queued"),
    Action("receive_message", "Message received", "Message receive failed", "Message delayed"),
    Action("read_notification", "Notification read", "Notification load failed", "Too many unread notifications"),
    Action("send_email", "Email sent", "Email delivery failed", "Email queued for retry"),
    Action("send_sms", "SMS sent", "SMS delivery failed", "SMS rate limit"),
    Action("push_notification", "Push notification sent", "Push failed", "Device token expired"),
    Action("chat_message", "Chat message delivered", "Chat message failed", "User offline"),
    Action("video_call", "Video call connected", "Video call failed", "Network quality poor"),
    Action("voice_call", "Voice call connected", "Voice call failed", "Audio quality degraded"),
    Action("group_chat", "Group message sent", "Group message failed", "Some members offline"),

    # Admin & Moderation (8 actions)
    Action("admin_login", "Admin login successful", "Admin login failed", "IP not whitelisted"),
    Action("user_ban", "User banned", "Ban action failed", "Ban requires review"),
    Action("content_moderation", "Content moderated", "Moderation action failed", "Requires manual review"),
    Action("bulk_update", "Bulk update complete", "Bulk update failed", "Partial update completed"),
    Action("system_config", "Configuration updated", "Config update failed", "Requires system restart"),
    Action("audit_log", "Audit log created", "Audit log failed", "Audit data incomplete"),
    Action("backup_create", "Backup created", "Backup failed", "Backup storage low"),
    Action("restore_data", "Data restored", "Restore failed", "Restore verification needed"),

    # Miscellaneous (17 actions)
    Action("health_check", "Health check passed", "Health check failed", "Degraded performance"),
    Action("subscription_upgrade", "Subscription upgraded", "Upgrade failed", "Billing verification required"),
    Action("subscription_cancel", "Subscription cancelled", "Cancellation failed", "Refund pending"),
    Action("invoice_payment", "Invoice paid", "Payment processing error", "Payment method declined"),
    Action("location_update", "Location updated", "Location update failed", "GPS accuracy low"),
    Action("qr_code_scan", "QR code scanned", "QR scan failed", "Invalid QR code"),
    Action("barcode_scan", "Barcode scanned", "Barcode scan failed", "Product not found"),
    Action("calendar_sync", "Calendar synced", "Calendar sync failed", "Sync conflicts detected"),
    Action("booking_create", "Booking confirmed", "Booking failed", "Limited availability"),
    Action("booking_cancel", "Booking cancelled", "Cancellation failed", "Cancellation fee applies"),
    Action("feedback_submit", "Feedback submitted", "Feedback submission failed", "Feedback pending review"),
    Action("survey_response", "Survey completed", "Survey submission failed", "Incomplete responses"),
    Action("referral_code", "Referral applied", "Invalid referral code", "Referral limit reached"),
    Action("loyalty_points", "Points credited", "Points credit failed", "Points expiring soon"),
    Action("gift_card_redeem", "Gift card redeemed", "Redemption failed", "Partial balance remaining"),
    Action("age_verification", "Age verified", "Age verification failed", "Manual verification required"),
    Action("captcha_verification", "CAPTCHA verified", "CAPTCHA failed", "Multiple CAPTCHA attempts"),
)


ERROR_CODES: tuple[str, ...] = (
    "ERR_DB_CONNECTION",
    "ERR_TIMEOUT",
    "ERR_INVALID_TOKEN",
    "ERR_PAYMENT_GATEWAY",
    "ERR_SERVICE_UNAVAILABLE",
    "ERR_INTERNAL_SERVER",
    "ERR_NETWORK_FAILURE",
    "ERR_AUTH_FAILED",
    "ERR_PERMISSION_DENIED",
    "ERR_RESOURCE_NOT_FOUND",
    "ERR_VALIDATION_FAILED",
    "ERR_RATE_LIMIT_EXCEEDED",
    "ERR_FILE_UPLOAD_FAILED",
    "ERR_FILE_TOO_LARGE",
    "ERR_INVALID_FORMAT",
    "ERR_DUPLICATE_ENTRY",
    "ERR_TRANSACTION_FAILED",
    "ERR_EXTERNAL_API_ERROR",
    "ERR_CACHE_MISS",
    "ERR_QUEUE_FULL",
    "ERR_MEMORY_LIMIT",
    "ERR_DISK_FULL",
    "ERR_SESSION_EXPIRED",
    "ERR_INVALID_CREDENTIALS",
    "ERR_DATABASE_LOCK",
    "ERR_DEADLOCK_DETECTED",
    "ERR_CONNECTION_REFUSED",
    "ERR_SSL_CERTIFICATE",
    "ERR_DNS_RESOLUTION",
)

WARNING_TYPES: tuple[str, ...] = (
    "RATE_LIMIT_WARNING",
    "SLOW_RESPONSE",
    "DEPRECATED_API",
    "CACHE_MISS",
    "RESOURCE_CONSTRAINT",
    "VALIDATION_WARNING",
    "HIGH_MEMORY_USAGE",
    "HIGH_CPU_USAGE",
    "DISK_SPACE_LOW",
    "CONNECTION_POOL_EXHAUSTED",
    "QUEUE_BACKLOG",
    "STALE_DATA",
    "PARTIAL_FAILURE",
    "RETRY_SCHEDULED",
    "FALLBACK_USED",
    "CIRCUIT_BREAKER_OPEN",
    "TIMEOUT_WARNING",
    "AUTHENTICATION_WARNING",
    "SUSPICIOUS_ACTIVITY",
    "QUOTA_WARNING",
    "EXPIRATION_WARNING",
    "SYNC_DELAY",
    "DATA_INCONSISTENCY",
    "CONFIGURATION_WARNING",
    "SECURITY_WARNING",
    "COMPLIANCE_WARNING",
    "PERFORMANCE_DEGRADATION",
    "API_VERSION_WARNING",
    "MAINTENANCE_WINDOW",
    "UPSTREAM_DEGRADED",
    "BACKUP_OVERDUE",
    "CERTIFICATE_EXPIRING",
    "LICENSE_WARNING",
    "INTEGRATION_WARNING",
)
