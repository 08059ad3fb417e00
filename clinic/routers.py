"""
URL mappings for the telehealth API.

Paths carry no trailing slash, matching what the mobile client sends.
"""
from django.urls import path

from .views import auth, care, dashboard, files, health, messaging, notifications, payments, profile, providers, video

urlpatterns = [
    path('healthz', health.healthz),

    # Authentication
    path('api/auth/signup', auth.sign_up, name='sign_up'),
    path('api/auth/signin', auth.sign_in, name='sign_in'),
    path('api/auth/signout', auth.sign_out, name='sign_out'),
    path('api/auth/user', auth.current_user, name='current_user'),
    path('api/auth/reset-password', auth.reset_password, name='reset_password'),
    path('api/auth/update-password', auth.update_password, name='update_password'),
    path('api/provider/signup', auth.provider_sign_up, name='provider_sign_up'),
    path('api/provider/signin', auth.provider_sign_in, name='provider_sign_in'),

    # Account profile and patient record
    path('api/profile', profile.user_profile),
    path('api/profile/update', profile.user_profile_update),
    path('api/profile/patient', profile.patient_profile),
    path('api/profile/medical-history', profile.medical_history),
    path('api/profile/allergies', profile.allergies),
    path('api/profile/medications', profile.medications),
    path('api/profile/insurance', profile.insurance),
    path('api/profile/consents', profile.consents),

    # Appointments, consultations, prescriptions, lab requests
    path('api/appointments', care.appointment_list),
    path('api/appointments/<str:pk>/status', care.appointment_status),
    path('api/consultations', care.consultation_list),
    path('api/consultations/<str:pk>', video.consultation_detail),
    path('api/consultations/<str:pk>/update', care.consultation_update),
    path('api/prescriptions', care.prescription_list),
    path('api/lab-requests', care.lab_request_list),
    path('api/lab-requests/<str:pk>/status', care.lab_request_status),

    # Payments
    path('api/payments/initialize', payments.initialize_payment),
    path('api/payments/verify', payments.verify_payment),
    path('api/payments/history', payments.payment_history),
    path('api/payments/record', payments.payment_record),
    path('api/payments/refund', payments.process_refund),
    path('api/payments/appointment-status', payments.appointment_payment_status),
    path('api/payments/<str:pk>', payments.payment_detail),
    path('api/payments/<str:pk>/refund', payments.refund_record),

    # Provider directory
    path('api/providers/<str:pk>', providers.provider_detail),
    path('api/providers/<str:pk>/availability', providers.provider_availability),
    path('api/providers/<str:pk>/rating', providers.provider_rating),

    # Provider's own profile
    path('api/provider/profile', providers.my_profile),
    path('api/provider/profile/update', providers.my_profile_update),
    path('api/provider/verify-license', providers.verify_license),
    path('api/provider/availability', providers.my_availability_update),
    path('api/provider/appointments', providers.my_appointments),
    path('api/provider/consultations', providers.my_consultations),

    # Provider dashboard
    path('api/provider/queue', dashboard.queue),
    path('api/provider/history', dashboard.history),
    path('api/provider/stats', dashboard.stats, name='provider_stats'),
    path('api/provider/consultations/<str:pk>/status', dashboard.consultation_status),
    path('api/provider/consultations/<str:pk>/notes', dashboard.consultation_notes),
    path('api/provider/prescriptions', dashboard.prescription),
    path('api/provider/lab-orders', dashboard.lab_order),
    path('api/provider/tasks', dashboard.tasks),
    path('api/provider/tasks/<str:pk>', dashboard.task_update),
    path('api/provider/tasks/<str:pk>/status', dashboard.task_status),
    path('api/provider/patients/<str:pk>', dashboard.patient_detail),
    path('api/provider/patients/<str:pk>/medical-history', dashboard.patient_medical_history),
    path('api/provider/follow-ups', dashboard.follow_up),

    # Messaging
    path('api/messages', messaging.messages),
    path('api/messages/unread', messaging.unread_messages),
    path('api/messages/read-conversation', messaging.conversation_read),
    path('api/messages/<str:pk>/read', messaging.message_read),
    path('api/conversations', messaging.conversations),

    # Notifications
    path('api/notifications', notifications.notification_list),
    path('api/notifications/read-all', notifications.notification_read_all),
    path('api/notifications/push', notifications.push),
    path('api/notifications/<str:pk>/read', notifications.notification_read),
    path('api/notifications/<str:pk>', notifications.notification_delete),
    path('api/devices', notifications.device_register),

    # Files
    path('api/files/documents', files.documents),
    path('api/files/insurance-card', files.insurance_card),
    path('api/files/lab-results', files.lab_result),
    path('api/files/profile-image', files.profile_image),
    path('api/files/delete', files.delete_file),
    path('api/files/url', files.file_url),

    # Video consultations
    path('api/video/token', video.token),
    path('api/video/<str:pk>/start', video.start),
    path('api/video/<str:pk>/end', video.end),
    path('api/video/<str:pk>/recording/start', video.recording_start),
    path('api/video/<str:pk>/recording/stop', video.recording_stop),
    path('api/video/<str:pk>/notes', video.notes),
    path('api/video/<str:pk>/prescription', video.prescription),
]
