from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from integrator.scheduler import get_scheduler
from integrator.sync import SOURCE_ORDER


@csrf_exempt
@require_POST
def run_sync(request):
    source = request.GET.get('source')
    if source and source not in SOURCE_ORDER:
        return JsonResponse({'error': f"unknown source {source!r}"}, status=400)

    report = get_scheduler().trigger(sources={source} if source else None)
    if report is None:
        return JsonResponse({'error': 'sync already running'}, status=409)
    return JsonResponse(report.to_dict())
