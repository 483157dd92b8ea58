"""
API routes for diagram cost estimation and optimization.
"""
from typing import Dict, Any, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logging

from backend.services.cost_estimator import CostEstimator, CostEstimatorError
from backend.services.cost_optimizer import CostOptimizer, OptimizationInputError, summarize_savings
from backend.pricing.pricing_tables import get_pricing_table
from backend.core.config import config


logger = logging.getLogger(__name__)
router = APIRouter()


class CostEstimateRequest(BaseModel):
    """Request model for estimating a diagram."""
    diagram: Optional[Dict[str, Any]] = Field(None, description="Diagram data with 'nodes' and 'edges'")
    provider: Optional[str] = Field(None, description="Cloud provider: aws, azure or gcp")


class CostCompareRequest(BaseModel):
    """Request model for comparing a diagram across providers."""
    diagram: Optional[Dict[str, Any]] = Field(None, description="Diagram data with 'nodes' and 'edges'")


class CostOptimizeRequest(BaseModel):
    """Request model for optimization suggestions."""
    breakdown: List[Dict[str, Any]] = Field(..., description="Breakdown items from a cost estimate")


@router.post("/api/costs/estimate")
async def estimate_diagram_costs(estimate_request: CostEstimateRequest) -> Dict[str, Any]:
    """
    Estimate monthly costs of a diagram for one provider.

    Args:
        estimate_request: Request body with diagram and optional provider

    Returns:
        JSON response with cost estimate and breakdown

    Raises:
        HTTPException: If the diagram or provider is invalid, or other errors occur
    """
    try:
        if estimate_request.diagram is None:
            raise HTTPException(
                status_code=400,
                detail="Diagram is required"
            )

        estimator = CostEstimator()
        try:
            estimation = estimator.estimate(
                diagram_data=estimate_request.diagram,
                provider=estimate_request.provider
            )
        except CostEstimatorError as error:
            raise HTTPException(
                status_code=400,
                detail=f"Failed to estimate costs: {str(error)}"
            ) from error

        return {
            "status": "ok",
            "estimate": estimation.to_dict()
        }

    except HTTPException:
        raise
    except Exception as error:
        logger.error(f"Unexpected error estimating costs: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while estimating costs"
        ) from error


@router.post("/api/costs/compare")
async def compare_provider_costs(compare_request: CostCompareRequest) -> Dict[str, Any]:
    """
    Estimate a diagram against every supported provider.

    Args:
        compare_request: Request body with diagram

    Returns:
        JSON response with one estimate per provider
    """
    try:
        if compare_request.diagram is None:
            raise HTTPException(
                status_code=400,
                detail="Diagram is required"
            )

        estimator = CostEstimator()
        try:
            estimations = estimator.compare_providers(compare_request.diagram)
        except CostEstimatorError as error:
            raise HTTPException(
                status_code=400,
                detail=f"Failed to estimate costs: {str(error)}"
            ) from error

        return {
            "status": "ok",
            "estimates": {
                provider: estimation.to_dict()
                for provider, estimation in estimations.items()
            }
        }

    except HTTPException:
        raise
    except Exception as error:
        logger.error(f"Unexpected error comparing provider costs: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while comparing costs"
        ) from error


@router.post("/api/costs/optimize")
async def suggest_cost_optimizations(optimize_request: CostOptimizeRequest) -> Dict[str, Any]:
    """
    Suggest cheaper sizes for oversized resources in a breakdown.

    Suggestions are recomputed on every call and never stored.

    Args:
        optimize_request: Request body with breakdown items

    Returns:
        JSON response with suggestions and the total potential savings
    """
    try:
        optimizer = CostOptimizer()
        try:
            suggestions = optimizer.optimize(optimize_request.breakdown)
        except OptimizationInputError as error:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid breakdown: {str(error)}"
            ) from error

        return {
            "status": "ok",
            "suggestions": [suggestion.to_dict() for suggestion in suggestions],
            "total_savings": round(summarize_savings(suggestions), 2),
        }

    except HTTPException:
        raise
    except Exception as error:
        logger.error(f"Unexpected error generating optimizations: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while generating optimizations"
        ) from error


@router.get("/api/costs/pricing/{provider}")
async def get_provider_pricing(provider: str) -> Dict[str, Any]:
    """
    Return the static price table for a provider.

    Args:
        provider: Cloud provider ("aws", "azure" or "gcp")

    Returns:
        JSON response with prices keyed by resource type and size

    Raises:
        HTTPException: If the provider is unknown
    """
    table = get_pricing_table(provider.lower())
    if table is None:
        raise HTTPException(
            status_code=404,
            detail=f"No pricing available for provider '{provider}'"
        )

    return {
        "status": "ok",
        "provider": provider.lower(),
        "currency": config.CURRENCY,
        "pricing": {
            resource_type: {size: entry.to_dict() for size, entry in sizes.items()}
            for resource_type, sizes in table.items()
        }
    }
