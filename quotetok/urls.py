from django.http import HttpResponse
from django.urls import include, path


def healthz(_request):
    return HttpResponse("ok", content_type="text/plain")


urlpatterns = [
    path('', include('quotes.urls')),
]

urlpatterns += [path("healthz", healthz)]
