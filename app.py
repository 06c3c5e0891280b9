from fastapi import FastAPI, HTTPException, Body
from pydantic import BaseModel, Field
import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any

from smartchart import (
    build_line_chart_layout,
    build_pie_chart_layout,
    configure_logging,
    DetectionToggles,
    EngineConfig,
    PieConfig,
    SeriesType,
)
from smartchart.performance import profiler, cache_manager, time_monitor
from smartchart.utils import convert_numpy_types

import logging

configure_logging()
logger = logging.getLogger("smartchart.app")

# Initialize FastAPI
app = FastAPI(title="Smart Chart Layout Server")


class LineLayoutRequest(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    x_field: str
    metric_keys: Optional[List[str]] = None
    detect: Optional[DetectionToggles] = None
    series_types: Optional[Dict[str, SeriesType]] = None
    left_series_type: Optional[SeriesType] = None
    right_series_type: Optional[SeriesType] = None
    series_names: Optional[Dict[str, str]] = None
    auto_series_type: bool = True
    config: EngineConfig = Field(default_factory=EngineConfig)
    seed: Optional[int] = None


class PieLayoutRequest(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    config: PieConfig = Field(default_factory=PieConfig)


@time_monitor
def compute_line_layout(request: LineLayoutRequest) -> Dict[str, Any]:
    layout = build_line_chart_layout(
        request.data,
        request.x_field,
        metric_keys=request.metric_keys,
        detect=request.detect,
        series_types=request.series_types,
        left_series_type=request.left_series_type,
        right_series_type=request.right_series_type,
        series_names=request.series_names,
        auto_series_type=request.auto_series_type,
        config=request.config,
        random_state=request.seed
    )
    return convert_numpy_types(layout.to_dict())


@time_monitor
def compute_pie_layout(request: PieLayoutRequest) -> Dict[str, Any]:
    layout = build_pie_chart_layout(request.data, request.config)
    return convert_numpy_types(layout.to_dict())


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}


@app.post("/layout/line")
def line_layout(request: LineLayoutRequest = Body(...)):
    """
    Build a line/bar chart layout.

    Responses are memoized when a seed is given; without one the axis
    clustering is not reproducible and every call recomputes.
    """
    request_id = str(uuid.uuid4())[:8]
    logger.info(f"[{request_id}] Line layout request: {len(request.data)} rows, x_field={request.x_field}")

    if not request.data:
        raise HTTPException(status_code=400, detail="No data to lay out")
    if not any(request.x_field in row for row in request.data):
        raise HTTPException(status_code=400, detail=f"X field '{request.x_field}' not found in data")

    try:
        cache_key = None
        if request.seed is not None:
            cache_key = cache_manager.generate_key("line", request.model_dump(mode="json"))
            cached = cache_manager.get(cache_key)
            if cached is not None:
                logger.info(f"[{request_id}] Served from cache")
                return {"request_id": request_id, "cached": True, "layout": cached}

        layout = compute_line_layout(request)
        if cache_key is not None:
            cache_manager.set(cache_key, layout)
        return {"request_id": request_id, "cached": False, "layout": layout}
    except Exception as e:
        logger.exception(f"[{request_id}] Error in /layout/line: {e}")
        raise HTTPException(status_code=500, detail=f"Error building line layout: {str(e)}")


@app.post("/layout/pie")
def pie_layout(request: PieLayoutRequest = Body(...)):
    """Build a pie chart layout."""
    request_id = str(uuid.uuid4())[:8]
    logger.info(f"[{request_id}] Pie layout request: {len(request.data)} slices")

    if not request.data:
        raise HTTPException(status_code=400, detail="No data to lay out")

    try:
        cache_key = cache_manager.generate_key("pie", request.model_dump(mode="json"))
        cached = cache_manager.get(cache_key)
        if cached is not None:
            logger.info(f"[{request_id}] Served from cache")
            return {"request_id": request_id, "cached": True, "layout": cached}

        layout = compute_pie_layout(request)
        cache_manager.set(cache_key, layout)
        return {"request_id": request_id, "cached": False, "layout": layout}
    except Exception as e:
        logger.exception(f"[{request_id}] Error in /layout/pie: {e}")
        raise HTTPException(status_code=500, detail=f"Error building pie layout: {str(e)}")


# Performance monitoring endpoints
@app.get("/performance")
def get_performance_stats():
    """Get performance monitoring statistics"""
    try:
        return {
            "status": "success",
            "profiler_summary": profiler.get_summary(),
            "cache_stats": cache_manager.get_stats(),
            "timestamp": datetime.now().isoformat()
        }
    except Exception as e:
        logger.error(f"Performance endpoint error: {str(e)}")
        return {"status": "error", "message": str(e)}


@app.post("/performance/clear-cache")
def clear_performance_cache(pattern: Optional[str] = None):
    """Clear layout cache"""
    try:
        removed = cache_manager.clear(pattern)
        return {
            "status": "success",
            "message": f"Cache cleared{f' (pattern: {pattern})' if pattern else ''}",
            "removed": removed,
            "timestamp": datetime.now().isoformat()
        }
    except Exception as e:
        logger.error(f"Cache clear error: {str(e)}")
        return {"status": "error", "message": str(e)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
